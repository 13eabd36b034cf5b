"""Prompt templates for CV conversion and tailoring."""

from __future__ import annotations

import re

CV_PLACEHOLDER = "{{CV}}"
JOB_PLACEHOLDER = "{{JOB}}"
ATS_PLACEHOLDER = "{{ATS}}"

_OPTIMIZE_FIELDS = re.compile(r"\{\{(?:CV|JOB|ATS)\}\}")

MD_TO_JSON_RESUME_PROMPT = """\
Convert the CV below into a JSON Resume document (https://jsonresume.org/schema).

Rules:
- Output exactly one JSON object and nothing else.
- Use only fields defined by the JSON Resume schema.
- Dates use YYYY-MM-DD, YYYY-MM or YYYY.
- Every value is a string unless the schema requires an array or object.
- Do not invent facts that are not in the CV.

CV:
{{CV}}
"""

OPTIMIZE_PROMPT = """\
Tailor the base CV below to the job description that follows it.

Rules:
- Output only the tailored CV as Markdown, with no preamble or commentary.
- Keep the CV's structure unless a change clearly helps this role.
- Reorder and rephrase to foreground experience the job asks for.
- Do not invent employers, titles, dates or skills that are not in the CV.
{{ATS}}
BASE CV:
{{CV}}

JOB DESCRIPTION:
{{JOB}}
"""

ATS_INSTRUCTIONS = """\

ATS mode:
- Use standard section headings (Summary, Experience, Skills, Education).
- Include relevant keywords from the job description.
- Avoid tables, columns and complex formatting.
- Use plain bullet points.
"""


def build_resume_prompt(cv_markdown: str, template: str = MD_TO_JSON_RESUME_PROMPT) -> str:
    """Substitute the CV text into ``template``."""

    if CV_PLACEHOLDER not in template:
        raise ValueError(f"Prompt template must include {CV_PLACEHOLDER}.")
    return template.replace(CV_PLACEHOLDER, cv_markdown)


def build_optimize_prompt(
    cv_markdown: str,
    job_description: str,
    *,
    ats: bool = False,
    template: str = OPTIMIZE_PROMPT,
) -> str:
    """Fill the optimize template; ``ats`` adds the applicant-tracking rules."""

    for placeholder in (CV_PLACEHOLDER, JOB_PLACEHOLDER):
        if placeholder not in template:
            raise ValueError(f"Prompt template must include {placeholder}.")
    values = {
        CV_PLACEHOLDER: cv_markdown,
        JOB_PLACEHOLDER: job_description,
        ATS_PLACEHOLDER: ATS_INSTRUCTIONS if ats else "",
    }
    # One pass, so placeholders inside the CV or job text stay literal.
    return _OPTIMIZE_FIELDS.sub(lambda match: values[match.group(0)], template)

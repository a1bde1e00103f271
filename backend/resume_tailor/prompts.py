"""Prompt templates for the per-section tailoring calls and resume Q&A."""

BULLET_RULES = """
Provide ONLY a list of improved bullet points - one per line, without numbers, quotes, or any additional formatting.
Focus on highlighting relevant skills and achievements that match the job requirements.
Don't mention the job posting or that this is a tailored version.
Keep each bullet point concise (1-2 sentences each).
Maintain approximately the same number of bullet points.
"""

SUMMARY_PROMPT = """
Tailor this professional summary for a job with the following details:

Original summary: "{summary}"

Job details:
{job_details}

Provide ONLY the improved summary text without any additional notes, markdown, quotes, or explanations.
Ensure it highlights relevant skills and experiences that match the job requirements.
Keep it concise and professional. Maximum 4-5 sentences.
"""

EXPERIENCE_PROMPT = """
Tailor these job responsibilities to be more relevant for a job with the following details:

Job title: "{title}"
Company: "{company}"

Original responsibilities:
{responsibilities}

Job details to tailor for:
{job_details}
""" + BULLET_RULES

SKILLS_PROMPT = """
Based on this job description, which of these skills should be emphasized and prioritized?

Original skills:
- Languages: {languages}
- Frameworks: {frameworks}
- Tools: {tools}
- Concepts: {concepts}

Job details:
{job_details}

Format your response as a JSON object with these exact keys:
{{
  "languages": ["list", "of", "tailored", "skills"],
  "frameworks": ["list", "of", "tailored", "skills"],
  "tools": ["list", "of", "tailored", "skills"],
  "concepts": ["list", "of", "tailored", "skills"]
}}

Don't remove any skills, but reorder them to put the most relevant ones first.
"""

PROJECT_PROMPT = """
Tailor this project description to be more relevant for a job with the following details:

Project name: "{name}"

Original description:
{description}

Job details to tailor for:
{job_details}
""" + BULLET_RULES

WORK_EXPERIENCE_PROMPT = """
Tailor these work responsibilities to be more relevant for a job with the following details:

Position: "{position}"
Company: "{company}"
Status: {status}

Original responsibilities:
{responsibilities}

Job details to tailor for:
{job_details}
""" + BULLET_RULES

SECTION_ITEMS_PROMPT = """
Tailor these {section} items to be more relevant for a job with the following details:

Original items:
{items}

Job details to tailor for:
{job_details}

Provide ONLY a list of improved items - one per line, without numbers, quotes, or any additional formatting.
Focus on highlighting relevant information that matches the job requirements.
Don't mention the job posting or that this is a tailored version.
Keep approximately the same number of items.
"""

SECTION_ENTRY_PROMPT = """
Tailor this {section} item to be more relevant for the job:

{context}

Original {field}:
{content}

Job details to tailor for:
{job_details}
""" + BULLET_RULES

QUESTION_PROMPT = """
I have a resume in JSON format:

{resume_json}

Based on this resume, please answer the following question:

"{question}"

Answer clearly, using only evidence found in the resume. If the format is not specified,
answer in STAR format highlighting the most relevant experience and qualifications from
the resume that relate to the question.
"""

"""
Prompt construction for resume extraction and tailoring.
"""

from langchain_core.prompts import PromptTemplate

from .models import ResumeRecord

TAILORING_INSTRUCTIONS = (
    "Analyze the job description and identify key requirements",
    "Tailor the summary to match the role",
    "Emphasize relevant experience and projects",
    "Highlight matching skills and add relevant keywords",
    "Use action verbs and quantifiable metrics",
    "Format as clean markdown with clear sections",
    "Keep it concise (1-2 pages worth of content)",
    "Ensure ATS compatibility",
)


class PromptBuilder:
    """Renders the fixed extraction and tailoring prompts."""

    def __init__(self):
        self._setup_prompts()

    def _setup_prompts(self) -> None:
        """Initialize prompt templates."""
        # Literal braces in the JSON shape are doubled for f-string templates.
        self.extraction_template = PromptTemplate.from_template(
            """You are an expert resume parser. Analyze the uploaded resume document and extract ALL information into the following JSON structure. Be thorough — extract every detail you can find.

Return ONLY valid JSON with this exact structure (no markdown, no code fences, just raw JSON):

{{
  "title": "A short title for this resume, e.g. 'Software Engineer Resume' based on the person's role",
  "personalInfo": {{
    "name": "Full name",
    "email": "Email address or empty string",
    "phone": "Phone number or empty string",
    "location": "City, State/Country or empty string"
  }},
  "summary": "Professional summary or objective. If none exists, generate a brief one from the resume content.",
  "experience": "All work experience formatted as:\\nCompany Name — Job Title (Start Date – End Date)\\n- Achievement/responsibility\\n- Achievement/responsibility\\n\\nRepeat for each position.",
  "education": "All education formatted as:\\nDegree — Institution (Year)\\nRelevant details\\n\\nRepeat for each entry.",
  "skills": "All skills as a comma-separated list",
  "projects": "All projects formatted as:\\nProject Name\\n- Description and details\\n\\nRepeat for each project. Empty string if none found."
}}"""
        )

        instructions = "\n".join(
            f"{i}. {line}" for i, line in enumerate(TAILORING_INSTRUCTIONS, start=1)
        )
        self.tailoring_template = PromptTemplate.from_template(
            """You are an expert resume writer. Create a tailored, professional resume based on the following information and job description.

USER'S RESUME:
Name: {name}
Email: {email}
Phone: {phone}
Location: {location}

Summary: {summary}
Experience: {experience}
Education: {education}
Skills: {skills}
Projects: {projects}

JOB DESCRIPTION:
{job_description}

INSTRUCTIONS:
"""
            + instructions.replace("{", "{{").replace("}", "}}")
            + """

Generate the tailored resume now:"""
        )

    def extraction_prompt(self) -> str:
        """Instruction text sent alongside the encoded document."""
        return self.extraction_template.format()

    def tailoring_prompt(self, resume: ResumeRecord, job_description: str) -> str:
        """
        Render the tailoring prompt.

        Args:
            resume: Structured resume, embedded verbatim
            job_description: Free-text job posting

        Returns:
            Prompt text (no attachment)
        """
        info = resume.personal_info
        return self.tailoring_template.format(
            name=info.name,
            email=info.email,
            phone=info.phone,
            location=info.location,
            summary=resume.summary,
            experience=resume.experience,
            education=resume.education,
            skills=resume.skills,
            projects=resume.projects or "None",
            job_description=job_description,
        )

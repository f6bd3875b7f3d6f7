# vgen/services/prompts.py
"""
Prompt builders for every generator.

Each function returns the user prompt text; GeminiClient prepends the
VGen Tools system prompt.
"""
import json
from typing import Any

RESUME_TEMPLATE_PROMPTS = {
    "modern": "Create a modern, clean resume with contemporary formatting and design elements.",
    "minimalist": "Create a minimalist resume with simple, clean lines and plenty of white space.",
    "academic": "Create an academic-style resume emphasizing research, publications, and educational background.",
    "technical": "Create a technical resume highlighting technical skills, projects, and certifications.",
    "creative": "Create a creative resume with unique formatting and visual elements for creative industries.",
    "executive": "Create an executive resume with a professional, leadership-focused layout.",
}

COVER_LETTER_TONE_PROMPTS = {
    "formal": "Use a traditional, formal tone suitable for conservative industries.",
    "professional": "Use a balanced, business-appropriate professional tone.",
    "enthusiastic": "Use an energetic, passionate tone that shows genuine interest in the role.",
    "confident": "Use an assertive, self-assured tone that highlights achievements.",
}

BIO_PLATFORM_LIMITS = {
    "linkedin": 2600,
    "twitter": 160,
    "instagram": 150,
    "general": 500,
    "website": 1000,
}

BIO_TONE_PROMPTS = {
    "professional": "Write in a professional, formal tone suitable for business and career purposes.",
    "casual": "Write in a friendly, approachable tone while maintaining professionalism.",
    "creative": "Write in an engaging, creative tone that showcases personality and uniqueness.",
    "technical": "Write in a technical, precise tone emphasizing expertise and achievements.",
    "friendly": "Write in a warm, welcoming tone that feels personal and approachable.",
}

INTERVIEW_TYPE_PROMPTS = {
    "technical": "Generate technical questions focusing on specific skills, technologies, and problem-solving abilities.",
    "behavioral": "Generate behavioral questions that assess past experiences, soft skills, and cultural fit.",
    "situational": "Generate situational questions that test how candidates would handle specific work scenarios.",
    "mixed": "Generate a balanced mix of technical, behavioral, and situational questions.",
}


def _dump(data: Any) -> str:
    return json.dumps(data, indent=2, default=str)


def resume_prompt(resume_data: dict, template: str = "modern") -> str:
    intro = RESUME_TEMPLATE_PROMPTS.get(template, RESUME_TEMPLATE_PROMPTS["modern"])
    return f"""{intro}

Please generate a professional resume based on the following information:
{_dump(resume_data)}

Format the resume in a structured, professional manner suitable for download.
Include all relevant sections and ensure ATS-friendly formatting.
Use clear headings and organize information logically.

Return the resume as a formatted text that can be easily parsed and styled."""


def cover_letter_prompt(
    resume_data: dict,
    job_description: str,
    tone: str = "professional",
    company_info: dict | None = None,
) -> str:
    company = f"\nCOMPANY INFORMATION:\n{_dump(company_info)}\n" if company_info else ""
    return f"""Generate a professional, tailored cover letter based on:

RESUME INFORMATION:
{_dump(resume_data)}

JOB DESCRIPTION:
{job_description}
{company}
TONE: {COVER_LETTER_TONE_PROMPTS.get(tone, COVER_LETTER_TONE_PROMPTS["professional"])}

REQUIREMENTS:
- Customize the cover letter to match the job requirements
- Highlight relevant experience and skills from the resume
- Show enthusiasm for the role and company
- Keep it concise (3-4 paragraphs)
- Use professional language and tone
- Include specific examples where possible

Format it as a properly structured cover letter with:
- Header with contact information
- Date
- Employer's contact information
- Salutation
- Body paragraphs
- Closing

Return only the cover letter content, ready to be used in a document."""


def job_analysis_prompt(job_description: str) -> str:
    return f"""Analyze the following job description and extract key information for cover letter writing:

JOB DESCRIPTION:
{job_description}

Please provide analysis in the following JSON format:
{{
  "keyRequirements": ["most important job requirements"],
  "preferredQualifications": ["nice-to-have qualifications"],
  "companyValues": ["company culture and values mentioned"],
  "keywords": ["important keywords and phrases"],
  "responsibilities": ["main job responsibilities"],
  "industry": "industry or sector",
  "jobLevel": "entry|mid|senior|executive",
  "suggestedTone": "formal|professional|enthusiastic|confident",
  "focusAreas": ["areas to emphasize in cover letter"]
}}

Be specific and thorough in your analysis. Return only the JSON object."""


def bio_prompt(
    bio_data: dict,
    platform: str = "general",
    tone: str = "professional",
    include_emojis: bool = False,
    keywords: list[str] | None = None,
) -> str:
    extra = []
    if keywords:
        extra.append(f"- Naturally include these keywords: {', '.join(keywords)}")
    if include_emojis:
        extra.append("- Emojis are welcome where they fit the platform")
    extra_lines = ("\n" + "\n".join(extra)) if extra else ""
    return f"""{BIO_TONE_PROMPTS.get(tone, BIO_TONE_PROMPTS["professional"])}

Generate a bio for {platform} with the following information:
{_dump(bio_data)}

REQUIREMENTS:
- Keep within {BIO_PLATFORM_LIMITS.get(platform, 500)} characters
- Make it engaging and impactful
- Highlight key strengths and achievements
- Include relevant keywords for the industry/field
- End with a call-to-action or forward-looking statement
- Optimize for the specific platform's audience and style{extra_lines}

Return only the bio text, ready to be used directly."""


def bio_keywords_prompt(current_bio: str, keywords: list[str], platform: str, tone: str) -> str:
    return f"""Optimize the following bio by naturally integrating these keywords: {', '.join(keywords)}

CURRENT BIO:
{current_bio}

PLATFORM: {platform}
TONE: {tone}

REQUIREMENTS:
- Integrate keywords naturally without keyword stuffing
- Maintain the original voice and tone
- Ensure the bio flows naturally
- Keep within {BIO_PLATFORM_LIMITS.get(platform, 500)} characters
- Make it more discoverable while keeping it authentic

Return only the optimized bio text."""


def flashcards_prompt(content: str, subject: str = "general", difficulty: str = "mixed", count: int = 10) -> str:
    level = "a mix of difficulty levels" if difficulty == "mixed" else f"{difficulty} difficulty"
    return f"""Transform the following content into interactive Q&A flashcards:

CONTENT:
{content}

SUBJECT: {subject}

REQUIREMENTS:
- Create {count} high-quality flashcards at {level}
- Each card should have a clear question and accurate answer
- Focus on key concepts, definitions, and important facts
- Make questions challenging but fair
- Ensure answers are concise and complete
- Organize cards by difficulty if possible

Return the flashcards in the following JSON format:
{{
  "flashcards": [
    {{
      "id": "unique_id",
      "question": "What is...?",
      "answer": "The definition or explanation...",
      "difficulty": "easy|medium|hard",
      "category": "topic_category"
    }}
  ],
  "totalCards": number,
  "estimatedStudyTime": "time_in_minutes"
}}"""


def resume_analysis_prompt(resume_text: str, job_description: str = "") -> str:
    job = f"JOB DESCRIPTION: {job_description}\n" if job_description else ""
    return f"""Analyze the following resume and provide detailed feedback:

RESUME CONTENT:
{resume_text}

{job}
Provide analysis in the following JSON format:
{{
  "overallScore": "percentage_0_100",
  "atsCompatibility": "percentage_0_100",
  "strengths": ["list", "of", "key", "strengths"],
  "weaknesses": ["list", "of", "areas", "for", "improvement"],
  "missingKeywords": ["keywords", "that", "should", "be", "included"],
  "recommendations": ["specific", "actionable", "suggestions"],
  "sectionAnalysis": {{
    "contactInfo": {{"score": 0-100, "feedback": "comments"}},
    "summary": {{"score": 0-100, "feedback": "comments"}},
    "experience": {{"score": 0-100, "feedback": "comments"}},
    "education": {{"score": 0-100, "feedback": "comments"}},
    "skills": {{"score": 0-100, "feedback": "comments"}}
  }},
  "keywordOptimization": ["suggested", "keywords", "to", "add"]
}}

Be thorough but constructive in your feedback."""


def keyword_optimization_prompt(resume_text: str, job_description: str, industry: str = "general") -> str:
    return f"""Analyze the following resume and job description to suggest keyword optimizations:

RESUME:
{resume_text}

JOB DESCRIPTION:
{job_description}

INDUSTRY: {industry}

Please provide keyword optimization suggestions in the following JSON format:
{{
  "missingKeywords": ["important keywords from job description not in resume"],
  "recommendedAdditions": ["specific suggestions for adding keywords naturally"],
  "keywordDensity": {{"current": "percentage", "recommended": "percentage"}},
  "industryKeywords": ["industry-specific keywords to consider"],
  "skillMatches": ["skills already well represented"],
  "optimizationTips": ["specific tips for keyword placement"]
}}"""


def skill_extraction_prompt(resume_text: str) -> str:
    return f"""Extract and categorize skills from the following resume text:

RESUME TEXT:
{resume_text}

Please organize skills into categories and return in the following JSON format:
{{
  "technical": ["JavaScript", "React", "Node.js"],
  "soft": ["Leadership", "Communication", "Problem Solving"],
  "languages": ["English", "Spanish"],
  "tools": ["Git", "Docker", "AWS"],
  "certifications": ["AWS Certified Developer", "PMP"],
  "totalSkills": total_count
}}"""


def interview_questions_prompt(
    job_description: str,
    question_type: str = "mixed",
    difficulty: str = "mixed",
    count: int = 10,
    industry: str = "general",
) -> str:
    level = "a mix of difficulty levels" if difficulty == "mixed" else f"{difficulty} difficulty"
    return f"""{INTERVIEW_TYPE_PROMPTS.get(question_type, INTERVIEW_TYPE_PROMPTS["mixed"])}

Based on the following job description, generate relevant interview questions:

JOB DESCRIPTION:
{job_description}

INDUSTRY: {industry}

REQUIREMENTS:
- Create {count} thoughtful, relevant questions
- Use {level}
- Focus on job requirements and responsibilities
- Make questions specific to the role and industry
- Include both common and unique questions

Return questions in the following JSON format:
{{
  "questions": [
    {{
      "id": "unique_id",
      "question": "The interview question",
      "type": "technical|behavioral|situational",
      "difficulty": "easy|medium|hard",
      "category": "specific_category",
      "suggestedAnswer": "Brief guidance on what to look for in answers"
    }}
  ],
  "totalQuestions": number,
  "questionDistribution": {{
    "technical": count,
    "behavioral": count,
    "situational": count
  }}
}}"""


def answer_guidance_prompt(question: dict, resume_data: dict | None = None, experience: str = "") -> str:
    background = f"USER BACKGROUND: {_dump(resume_data)}\n" if resume_data else ""
    extra = f"ADDITIONAL EXPERIENCE: {experience}\n" if experience else ""
    text = question.get("question", "")
    return f"""Provide guidance for answering this interview question:

QUESTION: {text}

CONTEXT:
- Question Type: {question.get("type", "general")}
- Difficulty: {question.get("difficulty", "medium")}
- Category: {question.get("category", "general")}

{background}{extra}
Provide answer guidance in the following format:
{{
  "question": {json.dumps(text)},
  "suggestedApproach": "Brief description of how to approach this question",
  "keyPoints": ["main points to cover"],
  "structure": "STAR|CAR|Technical|Behavioral",
  "tips": ["specific tips for this question"],
  "exampleOutline": "Brief example of how to structure the answer",
  "commonMistakes": ["things to avoid"]
}}"""

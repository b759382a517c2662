from resumeiq.ai.types import ChatMessage

SYSTEM_PROMPT = (
    "You are an expert ATS resume analyzer. "
    "Always respond with STRICT valid JSON only. "
    "No markdown, no explanation, no code fences."
)


def build_role_messages(resume_text: str, role: str) -> list[ChatMessage]:
    user = (
        f'Analyze the following resume for the role: "{role}"\n\n'
        "Return STRICT JSON only:\n\n"
        "{\n"
        '  "score": <integer 0-100, overall ATS fit score>,\n'
        '  "strengths": [<3-5 specific strengths as strings>],\n'
        '  "weaknesses": [<3-5 specific weaknesses as strings>],\n'
        '  "suggestions": [<5 actionable improvement suggestions as strings>]\n'
        "}\n\n"
        f"Resume:\n{resume_text.strip()}"
    )
    return [
        ChatMessage(role="system", content=SYSTEM_PROMPT),
        ChatMessage(role="user", content=user),
    ]


def build_jd_messages(resume_text: str, job_description: str) -> list[ChatMessage]:
    user = (
        "Compare the following resume against the provided job description.\n\n"
        "Step 1: Extract all required technical skills, tools, and qualifications from the Job Description.\n"
        "Step 2: Identify which of those appear in the resume and which are missing.\n"
        "Step 3: Compute a match_score (0-100) based on how well the resume covers the JD requirements.\n"
        "Step 4: Compute an overall ATS score (0-100) for general resume quality.\n\n"
        "Return STRICT JSON only:\n\n"
        "{\n"
        '  "score": <integer 0-100, overall ATS quality score>,\n'
        '  "match_score": <integer 0-100, JD keyword/requirements match score>,\n'
        '  "strengths": [<3-5 strengths that align with the JD>],\n'
        '  "weaknesses": [<3-5 gaps compared to the JD>],\n'
        '  "suggestions": [<5 actionable improvements to better match the JD>],\n'
        '  "missing_keywords": [<list of important JD keywords/skills missing from resume>]\n'
        "}\n\n"
        f"Job Description:\n{job_description.strip()}\n\n"
        f"Resume:\n{resume_text.strip()}"
    )
    return [
        ChatMessage(role="system", content=SYSTEM_PROMPT),
        ChatMessage(role="user", content=user),
    ]

import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert HR professional and recruiter who writes compelling job "
    "descriptions that attract top talent. Your descriptions are detailed, "
    "professional, and highlight both the role requirements and company benefits."
)

USER_PROMPT_TEMPLATE = """Generate a comprehensive and professional job description for the following position:

Job Title: {job_title}
Company: {company}
Location: {location}
Job Type: {job_type}

Please create a detailed job description that includes:
1. A compelling overview of the role
2. Key responsibilities (3-5 bullet points)
3. Required qualifications and skills
4. Preferred qualifications
5. What the company offers (benefits/culture)

Make it engaging, professional, and tailored to attract qualified candidates. The description should be 300-800 words and formatted with clear sections. Use a professional but welcoming tone.

Focus on making this specific to the {job_title} role and highlight the most important aspects that would appeal to potential candidates."""

RETRY_MESSAGE = "Failed to generate job description. Please try again."


class GenerateDescriptionResult(BaseModel):
    success: bool
    description: Optional[str] = None
    error: Optional[str] = None


class DescriptionGenerator:
    """Drafts job descriptions through an OpenAI-compatible chat completions API."""

    def __init__(
        self,
        api_key: Optional[str],
        api_base: str = "https://api.groq.com/openai/v1",
        model: str = "meta-llama/llama-4-scout-17b-16e-instruct",
        timeout: float = 30.0,
        temperature: float = 0.7,
        max_tokens: int = 1000,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key
        self.api_base = api_base.rstrip("/")
        self.model = model
        self.timeout = timeout
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._http_client = http_client

    def build_payload(
        self,
        job_title: str,
        company: Optional[str] = None,
        location: Optional[str] = None,
        job_type: Optional[str] = None,
    ) -> Dict[str, Any]:
        prompt = USER_PROMPT_TEMPLATE.format(
            job_title=job_title,
            company=company or "a leading company",
            location=location or "Various locations",
            job_type=job_type or "Full-Time",
        )
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }

    async def _post(self, payload: Dict[str, Any]) -> httpx.Response:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        url = f"{self.api_base}/chat/completions"
        if self._http_client is not None:
            return await self._http_client.post(
                url, json=payload, headers=headers, timeout=self.timeout
            )
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.post(url, json=payload, headers=headers)

    async def generate(
        self,
        job_title: str,
        company: Optional[str] = None,
        location: Optional[str] = None,
        job_type: Optional[str] = None,
    ) -> GenerateDescriptionResult:
        if not job_title or not job_title.strip():
            return GenerateDescriptionResult(success=False, error="Job title is required")

        if not self.api_key:
            logger.error("LLM API key is not configured")
            return GenerateDescriptionResult(success=False, error=RETRY_MESSAGE)

        payload = self.build_payload(job_title.strip(), company, location, job_type)
        try:
            response = await self._post(payload)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"LLM API error: status={e.response.status_code} model={self.model}"
            )
            return GenerateDescriptionResult(success=False, error=RETRY_MESSAGE)
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"LLM API request failed: {e!r}")
            return GenerateDescriptionResult(success=False, error=RETRY_MESSAGE)

        try:
            content = body["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            content = None

        if not content or not content.strip():
            return GenerateDescriptionResult(
                success=False, error="Failed to generate description"
            )

        return GenerateDescriptionResult(success=True, description=content.strip())

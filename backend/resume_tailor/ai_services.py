"""
AI Services Module for Resume Tailor
Thin adapters over the two external AI APIs:
- VLM Run parses a resume PDF into structured JSON
- Gemini generates text from a prompt
"""
import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

from . import config
from .errors import GeneratorError, ParserError

logger = logging.getLogger(__name__)

PENDING_STATUSES = {"enqueued", "pending", "running"}


class GeminiService:
    """Text generation through the Gemini generateContent REST endpoint"""

    def __init__(self, api_key: str, model: Optional[str] = None):
        self.api_key = api_key
        self.model = model or config.GEMINI_MODEL
        self.base_url = config.GEMINI_BASE_URL.rstrip("/")

    async def generate(self, prompt: str) -> str:
        headers = {"Content-Type": "application/json", "x-goog-api-key": self.api_key}
        payload = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
        url = f"{self.base_url}/models/{self.model}:generateContent"

        try:
            async with httpx.AsyncClient(timeout=config.GEMINI_TIMEOUT) as client:
                response = await client.post(url, headers=headers, json=payload)
        except httpx.HTTPError as e:
            raise GeneratorError(f"Gemini request failed: {e}") from e

        if response.status_code != 200:
            raise GeneratorError(f"Gemini API call failed: {response.status_code} {response.text}")

        return self._extract_text(response.json())

    @staticmethod
    def _extract_text(result: Dict[str, Any]) -> str:
        candidates = result.get("candidates") or []
        if not candidates:
            feedback = result.get("promptFeedback")
            if feedback:
                logger.warning(f"Gemini returned no candidates: {feedback}")
            return ""
        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(p.get("text", "") for p in parts if isinstance(p, dict))


class VlmRunService:
    """Resume PDF parsing through the VLM Run document API"""

    def __init__(self, api_key: str, model: Optional[str] = None):
        self.api_key = api_key
        self.model = model or config.VLMRUN_MODEL
        self.base_url = config.VLMRUN_BASE_URL.rstrip("/")

    @property
    def headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.api_key}"}

    async def parse_resume(self, file_bytes: bytes, filename: str = "resume.pdf") -> Dict[str, Any]:
        """Upload the PDF and return the raw prediction envelope."""
        try:
            async with httpx.AsyncClient(timeout=config.VLMRUN_TIMEOUT) as client:
                file_id = await self._upload(client, file_bytes, filename)
                prediction = await self._generate(client, file_id)
                return await self._wait_for(client, prediction)
        except httpx.HTTPError as e:
            logger.error(f"VLM Run request failed: {e}")
            raise ParserError(f"Failed to parse resume: {e}") from e

    async def _upload(self, client: httpx.AsyncClient, file_bytes: bytes, filename: str) -> str:
        response = await client.post(
            f"{self.base_url}/files",
            headers=self.headers,
            params={"purpose": "assistants"},
            files={"file": (filename, file_bytes, "application/pdf")},
        )
        if not response.is_success:
            raise ParserError(f"Failed to parse resume: upload failed: {response.status_code} {response.text}")
        file_id = response.json().get("id")
        if not file_id:
            raise ParserError("Failed to parse resume: upload returned no file id")
        return file_id

    async def _generate(self, client: httpx.AsyncClient, file_id: str) -> Dict[str, Any]:
        response = await client.post(
            f"{self.base_url}/document/generate",
            headers=self.headers,
            json={"file_id": file_id, "model": self.model, "domain": "document.resume", "batch": False},
        )
        if not response.is_success:
            raise ParserError(f"Failed to parse resume: {response.status_code} {response.text}")
        return response.json()

    async def _wait_for(self, client: httpx.AsyncClient, prediction: Dict[str, Any]) -> Dict[str, Any]:
        attempts = 0
        while prediction.get("status") in PENDING_STATUSES:
            if attempts >= config.VLMRUN_POLL_ATTEMPTS:
                raise ParserError("Failed to parse resume: prediction timed out")
            attempts += 1
            await asyncio.sleep(config.VLMRUN_POLL_INTERVAL)
            response = await client.get(
                f"{self.base_url}/predictions/{prediction.get('id')}", headers=self.headers
            )
            if not response.is_success:
                raise ParserError(f"Failed to parse resume: {response.status_code} {response.text}")
            prediction = response.json()

        if prediction.get("status") == "failed":
            raise ParserError(f"Failed to parse resume: prediction {prediction.get('id')} failed")
        return prediction


# Utility functions to get AI service instances
def get_ai_service(api_key: str, model: Optional[str] = None) -> GeminiService:
    """Get a text generation service for the caller's Gemini key"""
    return GeminiService(api_key=api_key, model=model)


def get_parser_service(api_key: str) -> VlmRunService:
    """Get a document parsing service for the caller's VLM Run key"""
    return VlmRunService(api_key=api_key)

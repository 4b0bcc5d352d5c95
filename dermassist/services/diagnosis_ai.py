"""
Diagnosis AI Service
Sends the skin image and patient context to a multimodal model and turns its
free-form answer into a DiagnosisAnalysis.

- One request per case, bounded by a timeout, never retried
- The model's JSON is always validated and normalised before use
- Any failure falls back to the keyword classifier
"""

import asyncio
import base64
import json
import logging
import math
import re
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI, APIError

from config import settings
from dermassist.schemas.diagnosis import (
    DiagnosisAnalysis,
    PatientContext,
    RiskLevel,
    Severity,
)
from dermassist.services.fallback_classifier import classify_symptoms

logger = logging.getLogger(__name__)


class AnalysisError(Exception):
    """Model analysis could not be used; the caller falls back"""


class AnalysisUnavailable(AnalysisError):
    """The model could not be reached or returned no completion"""


class NoStructuredOutput(AnalysisError):
    """The completion contains no parseable JSON object"""


class IncompleteAnalysis(AnalysisError):
    """The JSON object lacks required fields"""

    def __init__(self, fields: List[str]):
        self.fields = list(fields)
        super().__init__(f"Missing required fields: {', '.join(self.fields)}")


REQUIRED_FIELDS = ("primaryCondition", "confidence", "severity", "riskLevel", "treatment")

SYSTEM_PROMPT = """You are an expert medical AI assistant specializing in dermatological conditions for rural healthcare workers in India. Your role is to analyze skin condition images and provide accurate, actionable diagnostic guidance for ASHA (Accredited Social Health Activist) workers.

CORE RESPONSIBILITIES:
- Analyze dermatological images with high accuracy
- Provide differential diagnoses with confidence levels
- Recommend appropriate treatments using locally available medications
- Determine urgency levels and referral needs
- Offer practical care instructions suitable for rural settings

COMMON CONDITIONS TO CONSIDER:
- Fungal infections (dermatophytosis, candidiasis, pityriasis versicolor)
- Bacterial infections (impetigo, cellulitis, folliculitis)
- Parasitic infections (scabies, pediculosis)
- Inflammatory conditions (eczema, contact dermatitis)
- Viral infections (herpes simplex, molluscum contagiosum)
- Nutritional deficiencies (pellagra, zinc deficiency)
- Environmental conditions (heat rash, insect bites)

TREATMENT CONSIDERATIONS:
- Prioritize medications available in rural PHCs
- Consider cost-effectiveness and accessibility
- Include non-pharmacological interventions

REFERRAL CRITERIA:
- Suspected malignancy or pre-malignant lesions
- Severe systemic involvement
- Treatment-resistant conditions
- Pediatric cases requiring specialist care

OUTPUT FORMAT:
Respond with a single JSON object and nothing else. Keep recommendations practical for rural healthcare settings with limited resources."""


def build_diagnostic_prompt(patient: PatientContext) -> str:
    """User message text; the image is attached as a separate content part"""
    return f"""
Analyze this dermatological case for an ASHA worker in rural India:

PATIENT INFORMATION:
- Name: {patient.name}
- Age: {patient.age}
- Gender: {patient.gender}
- Symptoms: {patient.symptoms}
- Duration: {patient.duration}
- Pain/Discomfort: {patient.severity or 'Not specified'}
- Fever/Systemic symptoms: {patient.fever or 'None reported'}
- Similar cases nearby: {patient.nearby_cases or 'None known'}

Provide a structured analysis in the following JSON format:
{{
  "primaryCondition": "Most likely condition name",
  "confidence": 85,
  "severity": "Mild/Moderate/Severe",
  "riskLevel": "GREEN/YELLOW/RED",
  "treatment": "Specific treatment recommendation",
  "referralNeeded": true,
  "reasoning": "Brief explanation of the diagnosis",
  "recommendations": ["Specific care instruction 1", "Specific care instruction 2"],
  "followUp": "When to review or refer",
  "warningSigns": ["Sign 1 to watch for", "Sign 2 to watch for"]
}}

Risk Level Guidelines:
- GREEN: Minor conditions treatable with basic care
- YELLOW: Moderate conditions requiring monitoring and basic treatment
- RED: Serious conditions requiring immediate referral to PHC/hospital
"""


_CODE_FENCE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)


def _first_object(candidate: str) -> Optional[Dict[str, Any]]:
    # ValueError also covers integer literals past the interpreter's digit limit
    try:
        parsed = json.loads(candidate)
        if isinstance(parsed, dict):
            return parsed
    except ValueError:
        pass

    decoder = json.JSONDecoder()
    start = candidate.find("{")
    while start != -1:
        try:
            parsed, _ = decoder.raw_decode(candidate, start)
        except ValueError:
            parsed = None
        if isinstance(parsed, dict):
            return parsed
        start = candidate.find("{", start + 1)
    return None


def extract_json_object(text: Optional[str]) -> Dict[str, Any]:
    """
    Return the first top-level JSON object in a completion.

    A fenced block is tried first; when it holds no object the whole
    completion is scanned. Pure JSON is parsed directly, otherwise each '{'
    is tried in turn until one decodes to an object.
    """
    if not text or not text.strip():
        raise NoStructuredOutput("Empty response from AI model")

    candidates = [text.strip()]
    fenced = _CODE_FENCE.search(text)
    if fenced:
        candidates.insert(0, fenced.group(1).strip())

    for candidate in candidates:
        parsed = _first_object(candidate)
        if parsed is not None:
            return parsed

    raise NoStructuredOutput("No valid JSON found in AI response")


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _coerce_confidence(value: Any) -> Optional[int]:
    """Numeric confidence clamped into [0, 100]; None if not a number"""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        # ints beyond float range are clamped without converting
        return min(max(value, 0), 100)
    if isinstance(value, str):
        value = value.strip().rstrip("%").strip()
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if math.isnan(number):
        return None
    return int(round(min(max(number, 0.0), 100.0)))


def _coerce_enum(enum_cls, value: Any):
    if not isinstance(value, str):
        return None
    wanted = value.strip().lower()
    for member in enum_cls:
        if member.value.lower() == wanted:
            return member
    return None


def _coerce_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "1")
    return bool(value)


def _string_list(value: Any) -> List[str]:
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, list):
        return [str(item) for item in value if not _is_blank(item)]
    return []


def parse_ai_response(text: Optional[str]) -> DiagnosisAnalysis:
    """
    Validate and normalise a model completion.

    Raises NoStructuredOutput when no JSON object is present and
    IncompleteAnalysis (naming the fields) when required fields are missing
    or unusable. Confidence is clamped and a RED risk level always sets
    referralNeeded.
    """
    data = extract_json_object(text)

    confidence = _coerce_confidence(data.get("confidence"))
    severity = _coerce_enum(Severity, data.get("severity"))
    risk_level = _coerce_enum(RiskLevel, data.get("riskLevel"))

    unusable = {
        "confidence": confidence is None,
        "severity": severity is None,
        "riskLevel": risk_level is None,
    }
    missing = [
        field for field in REQUIRED_FIELDS
        if _is_blank(data.get(field)) or unusable.get(field, False)
    ]
    if missing:
        raise IncompleteAnalysis(missing)

    return DiagnosisAnalysis(
        primary_condition=str(data["primaryCondition"]).strip(),
        confidence=confidence,
        severity=severity,
        risk_level=risk_level,
        treatment=str(data["treatment"]).strip(),
        referral_needed=_coerce_bool(data.get("referralNeeded")) or risk_level == RiskLevel.RED,
        reasoning=str(data.get("reasoning") or "AI analysis completed"),
        recommendations=_string_list(data.get("recommendations")),
        follow_up=str(data.get("followUp") or "Follow up as needed"),
        warning_signs=_string_list(data.get("warningSigns")),
    )


class DiagnosisAIService:
    """
    Wraps the external multimodal model.
    The client is created lazily so the app starts without an API key.
    """

    def __init__(
        self,
        client: Optional[Any] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self._client = client
        self.model = model or settings.AI_MODEL
        self.timeout = timeout if timeout is not None else settings.AI_TIMEOUT_SECONDS

    def _get_client(self):
        if self._client is None:
            api_key = settings.ai_api_key
            if not api_key:
                raise AnalysisUnavailable("AI API key is not configured")
            self._client = AsyncOpenAI(
                base_url=settings.AI_BASE_URL,
                api_key=api_key,
                timeout=self.timeout,
                max_retries=0,
            )
        return self._client

    async def request_analysis(self, image_data: bytes, patient: PatientContext) -> str:
        """
        Make the single model call and return the raw completion text.
        Every transport failure is reported as AnalysisUnavailable.
        """
        client = self._get_client()
        image_b64 = base64.b64encode(image_data).decode("ascii")

        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": build_diagnostic_prompt(patient)},
                    {
                        "type": "image_url",
                        "image_url": {"url": f"data:image/jpeg;base64,{image_b64}"},
                    },
                ],
            },
        ]

        try:
            response = await asyncio.wait_for(
                client.chat.completions.create(
                    model=self.model,
                    messages=messages,
                    max_tokens=settings.AI_MAX_TOKENS,
                    temperature=settings.AI_TEMPERATURE,
                    top_p=settings.AI_TOP_P,
                    extra_body={"top_k": settings.AI_TOP_K},
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise AnalysisUnavailable(f"AI model did not answer within {self.timeout}s") from e
        except APIError as e:
            raise AnalysisUnavailable(f"AI model request failed: {e}") from e

        if not response.choices:
            raise AnalysisUnavailable("AI model returned no choices")
        content = response.choices[0].message.content
        if not content:
            raise AnalysisUnavailable("AI model returned an empty completion")
        return content

    async def analyze(self, image_data: bytes, patient: PatientContext) -> DiagnosisAnalysis:
        """
        Analyze one case. Never raises for model problems: those are logged
        and answered by the keyword classifier instead.
        """
        try:
            raw = await self.request_analysis(image_data, patient)
            analysis = parse_ai_response(raw)
            logger.info(f"AI analysis completed: {analysis.primary_condition} ({analysis.risk_level.value})")
            return analysis
        except AnalysisError as e:
            logger.warning(f"AI analysis unusable ({type(e).__name__}: {e}), using fallback classifier")
            return classify_symptoms(patient)


# Singleton instance
diagnosis_ai = DiagnosisAIService()


def get_diagnosis_ai_service() -> DiagnosisAIService:
    return diagnosis_ai

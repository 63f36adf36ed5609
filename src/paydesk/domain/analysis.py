"""LLM-backed financial commentary on the current workspace."""

import json
import logging
from decimal import Decimal
from typing import Any, Iterable, Optional, Sequence

import openai

from paydesk.config import DEFAULT_OPENAI_MODEL, DEFAULT_ORGANIZATION
from paydesk.domain.entities import (
    AnalysisResult,
    Department,
    Employee,
    Expense,
    RiskLevel,
)
from paydesk.domain.employee import MONTHS_PER_YEAR

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a deeply experienced Chief Financial Officer for {organization}. "
    "Always respond with valid JSON."
)

USER_PROMPT = """Analyze the following financial data for our organization. All values are in INR (₹).

Context: {context}
Data: {data}

Return ONLY a JSON object with this shape:
{{
  "summary": string,
  "recommendations": string[],
  "riskLevel": "Low" | "Medium" | "High"
}}

Rules:
- Keep the summary under 120 words.
- Provide 3 to 5 specific, actionable recommendations to optimize spend or budget.
- Do not include markdown, code fences, or additional keys."""


class AnalysisResponseError(ValueError):
    """The model answered with something that is not a valid analysis."""


def _money(value: Decimal) -> float:
    return float(round(value, 2))


def build_financial_payload(
    employees: Sequence[Employee],
    expenses: Sequence[Expense],
    departments: Sequence[Department],
    context: str,
) -> dict[str, Any]:
    """Summarize the workspace into the compact payload sent to the model.

    Payroll is the monthly share of active employees' annual salaries,
    attributed to departments through their allocations.
    """
    active = [e for e in employees if e.is_active]
    total_payroll = sum((e.total_annual_salary for e in active), Decimal("0")) / MONTHS_PER_YEAR
    total_expenses = sum((e.amount for e in expenses), Decimal("0"))

    breakdown = []
    for department in departments:
        spent = sum((e.amount for e in expenses if e.department == department.name), Decimal("0"))
        payroll = sum((e.allocated_salary(department.name) for e in active), Decimal("0")) / MONTHS_PER_YEAR
        breakdown.append(
            {
                "department": department.name,
                "budget": _money(department.monthly_budget),
                "spent": _money(spent + payroll),
                "details": {"expenses": _money(spent), "payroll": _money(payroll)},
            }
        )

    return {
        "context": context,
        "currency": "INR (₹)",
        "totalMonthlyPayroll": _money(total_payroll),
        "totalExpenses": _money(total_expenses),
        "activeHeadcount": len(active),
        "departmentBreakdown": breakdown,
    }


def parse_analysis(content: Optional[str]) -> AnalysisResult:
    """Validate the model's JSON answer.

    Raises:
        AnalysisResponseError: If the answer is missing, malformed or has an
            unknown risk level
    """
    if not content:
        raise AnalysisResponseError("Empty response")
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise AnalysisResponseError(f"Response is not JSON: {e}") from e
    if not isinstance(data, dict):
        raise AnalysisResponseError("Response is not a JSON object")

    summary = data.get("summary")
    recommendations = data.get("recommendations")
    if not isinstance(summary, str) or not summary.strip():
        raise AnalysisResponseError("Response has no summary")
    if not isinstance(recommendations, list) or not all(isinstance(r, str) for r in recommendations):
        raise AnalysisResponseError("Recommendations must be a list of strings")
    try:
        risk_level = RiskLevel(str(data.get("riskLevel", "")).strip().capitalize())
    except ValueError:
        raise AnalysisResponseError(f"Unknown risk level {data.get('riskLevel')!r}")

    return AnalysisResult(
        summary=summary.strip(),
        recommendations=tuple(r.strip() for r in recommendations if r.strip()),
        risk_level=risk_level,
    )


class FinancialAnalyst:
    """Service for asking a chat model to assess the budget position."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        organization: str = DEFAULT_ORGANIZATION,
        client: Optional[Any] = None,
    ):
        """Initialize the analyst.

        Args:
            api_key: OpenAI API key. Without a key (or a client) analysis is
                disabled.
            model: Chat model name, defaults to gpt-4o-mini
            organization: Organization named in the prompt
            client: Pre-built AsyncOpenAI-compatible client
        """
        self.api_key = api_key
        self.model = model or DEFAULT_OPENAI_MODEL
        self.organization = organization
        self._client = client

    @property
    def enabled(self) -> bool:
        return self._client is not None or bool(self.api_key)

    def _get_client(self) -> Any:
        if self._client is None:
            self._client = openai.AsyncOpenAI(api_key=self.api_key)
        return self._client

    async def analyze(
        self,
        employees: Iterable[Employee],
        expenses: Iterable[Expense],
        departments: Iterable[Department],
        context: str,
    ) -> Optional[AnalysisResult]:
        """Produce an executive summary, recommendations and a risk level.

        Args:
            employees: Employees to consider
            expenses: Expenses already filtered to the period of interest
            departments: Departments with their monthly budgets
            context: Free-text description of the view (e.g. 'October 2025')

        Returns:
            AnalysisResult, or None if analysis is disabled or failed
        """
        if not self.enabled:
            logger.warning("No OpenAI API key configured; financial analysis is disabled")
            return None

        payload = build_financial_payload(list(employees), list(expenses), list(departments), context)
        messages = [
            {"role": "system", "content": SYSTEM_PROMPT.format(organization=self.organization)},
            {
                "role": "user",
                "content": USER_PROMPT.format(context=context, data=json.dumps(payload, ensure_ascii=False)),
            },
        ]

        try:
            response = await self._get_client().chat.completions.create(
                model=self.model,
                messages=messages,
                response_format={"type": "json_object"},
                temperature=0.3,
            )
            result = parse_analysis(response.choices[0].message.content)
        except openai.OpenAIError as e:
            logger.error("Financial analysis request failed: %s", e)
            return None
        except AnalysisResponseError as e:
            logger.error("Financial analysis returned an unusable answer: %s", e)
            return None

        logger.info("Financial analysis for '%s': risk %s", context, result.risk_level.value)
        return result

"""Cost analysis suggestions from a hosted language model."""

import json
import logging
from typing import Any, Dict, List, Sequence

from openai import OpenAI
from pydantic import BaseModel, Field

from core.settings import Settings
from modules.catalog.entities import Component, Product
from modules.costing.service import index_components, total_cost

logger = logging.getLogger(__name__)

MAX_COMPONENTS = 20
MAX_PRODUCTS = 10

SYSTEM_PROMPT = "You are a cost analyst for an imitation-jewelry business. Reply ONLY with JSON."

PROMPT_TEMPLATE = """Analyze the following inventory data:
Components: {components} (sample)
Products: {products} (sample)

Provide:
1. A brief analysis of cost drivers (max 2 sentences).
2. 3 specific suggestions to reduce costs or optimize pricing (e.g. bulk buying specific expensive components, adjusting making charges).

Return keys: analysis (string), suggestions (array of strings).
"""


class AdvisorResult(BaseModel):
    analysis: str
    suggestions: List[str] = Field(default_factory=list)


FALLBACK_RESULT = AdvisorResult(
    analysis="Could not generate analysis at this time.",
    suggestions=["Check your internet connection", "Ensure API key is valid"],
)


def build_advisor_payload(products: Sequence[Product], components: Sequence[Component]) -> Dict[str, List[Dict[str, Any]]]:
    index = index_components(components)
    return {
        "components": [
            {"name": c.name, "price": c.price, "unit": c.unit} for c in list(components)[:MAX_COMPONENTS]
        ],
        "products": [
            {"name": p.name, "totalCost": total_cost(p, index), "makingCharges": p.making_charges}
            for p in list(products)[:MAX_PRODUCTS]
        ],
    }


def build_prompt(payload: Dict[str, List[Dict[str, Any]]]) -> str:
    return PROMPT_TEMPLATE.format(
        components=json.dumps(payload["components"]),
        products=json.dumps(payload["products"]),
    )


class CostAdvisor:
    """Wraps an OpenAI client; ``analyze`` always returns a result."""

    def __init__(self, settings: Settings, client=None):
        self.settings = settings
        self._client = client

    def _get_client(self):
        if self._client is None:
            self._client = OpenAI(api_key=self.settings.openai_api_key)
        return self._client

    @property
    def available(self) -> bool:
        return self._client is not None or bool(self.settings.openai_api_key)

    def analyze(self, products: Sequence[Product], components: Sequence[Component]) -> AdvisorResult:
        if not self.available:
            logger.info("No advisor API key configured; returning fallback analysis")
            return FALLBACK_RESULT
        prompt = build_prompt(build_advisor_payload(products, components))
        try:
            resp = self._get_client().chat.completions.create(
                model=self.settings.advisor_model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                response_format={"type": "json_object"},
                temperature=0.2,
            )
            text = resp.choices[0].message.content
            if not text:
                raise ValueError("Empty response from advisor model")
            return AdvisorResult.model_validate_json(text)
        except Exception:
            logger.exception("Advisor request failed")
            return FALLBACK_RESULT

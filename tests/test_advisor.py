import json
from types import SimpleNamespace

import pytest

from core.settings import Settings
from modules.advisor.service import (
    FALLBACK_RESULT,
    MAX_COMPONENTS,
    MAX_PRODUCTS,
    CostAdvisor,
    build_advisor_payload,
    build_prompt,
)
from modules.catalog.entities import Component, Product, ProductComponent


class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def fake_client(completions):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


@pytest.fixture
def catalog():
    components = [Component(id=str(i), name=f"Part {i}", price=i, unit="pcs") for i in range(25)]
    products = [
        Product(
            id=f"p{i}",
            name=f"Piece {i}",
            making_charges=10,
            components=[ProductComponent(component_id="3", quantity=2)],
        )
        for i in range(12)
    ]
    return products, components


def test_payload_is_capped_and_reduced(catalog):
    products, components = catalog

    payload = build_advisor_payload(products, components)

    assert len(payload["components"]) == MAX_COMPONENTS
    assert len(payload["products"]) == MAX_PRODUCTS
    assert payload["components"][3] == {"name": "Part 3", "price": 3.0, "unit": "pcs"}
    assert payload["products"][0] == {"name": "Piece 0", "totalCost": 16.0, "makingCharges": 10.0}


def test_prompt_embeds_payload_as_json(catalog):
    products, components = catalog
    payload = build_advisor_payload(products[:1], components[:1])

    prompt = build_prompt(payload)

    assert json.dumps(payload["components"]) in prompt
    assert json.dumps(payload["products"]) in prompt


def test_without_key_returns_fallback(catalog):
    advisor = CostAdvisor(Settings(openai_api_key=None))

    assert advisor.available is False
    assert advisor.analyze(*catalog) == FALLBACK_RESULT


def test_parses_model_reply(catalog):
    reply = {"analysis": "Chains dominate cost.", "suggestions": ["Buy chain in bulk", "Raise charges", "Swap clasps"]}
    completions = FakeCompletions(content=json.dumps(reply))
    advisor = CostAdvisor(Settings(advisor_model="test-model"), client=fake_client(completions))

    result = advisor.analyze(*catalog)

    assert result.analysis == "Chains dominate cost."
    assert result.suggestions == reply["suggestions"]
    [call] = completions.calls
    assert call["model"] == "test-model"
    assert call["response_format"] == {"type": "json_object"}


def test_client_error_returns_fallback(catalog):
    completions = FakeCompletions(error=RuntimeError("network down"))
    advisor = CostAdvisor(Settings(), client=fake_client(completions))

    assert advisor.analyze(*catalog) == FALLBACK_RESULT
    assert len(completions.calls) == 1


@pytest.mark.parametrize("content", ["not json", "", '{"suggestions": []}'])
def test_unusable_reply_returns_fallback(catalog, content):
    advisor = CostAdvisor(Settings(), client=fake_client(FakeCompletions(content=content)))

    assert advisor.analyze(*catalog) == FALLBACK_RESULT

"""
Tests for the company knowledge base.
"""

import pytest

from profit_flow.backend.backend_core.company import CompanyKnowledgeBase
from profit_flow.backend.backend_core.errors import NotConfigured

from conftest import COMPANY_DOCUMENT


def test_subscription_is_an_alias_for_pricing(knowledge_base):
    assert knowledge_base.lookup("subscription") == {"pricing": COMPANY_DOCUMENT["pricing"]}
    assert knowledge_base.lookup("subscription") == knowledge_base.lookup("pricing")


def test_all_returns_full_document(knowledge_base):
    document = knowledge_base.lookup("all")

    assert document["name"] == "Profit Flow"
    for section in ("features", "pricing", "benefits", "support", "faq"):
        assert document[section] == COMPANY_DOCUMENT[section]


def test_default_category_is_all(knowledge_base):
    assert knowledge_base.lookup() == knowledge_base.lookup("all")
    assert knowledge_base.lookup(None) == knowledge_base.lookup("all")


def test_missing_section_is_none(knowledge_base):
    assert knowledge_base.lookup("careers") == {"careers": None}


def test_missing_document_is_not_configured(database):
    kb = CompanyKnowledgeBase(database, "Nobody Inc")

    with pytest.raises(NotConfigured):
        kb.lookup("pricing")


def test_upsert_replaces_document(knowledge_base):
    knowledge_base.upsert({"features": ["Only one"]})

    assert knowledge_base.lookup("features") == {"features": ["Only one"]}
    assert knowledge_base.lookup("pricing") == {"pricing": None}


def test_seed_from_yaml_keyed_by_organization(database, tmp_path):
    path = tmp_path / "company.yaml"
    path.write_text(
        "Profit Flow:\n"
        "  features:\n"
        "    - Live quotes\n"
        "  pricing:\n"
        "    pro: INR 499\n",
        encoding="utf-8",
    )
    kb = CompanyKnowledgeBase(database, "Profit Flow")

    assert kb.seed_from_yaml(path) is True
    assert kb.lookup("subscription") == {"pricing": {"pro": "INR 499"}}


def test_seed_from_yaml_does_not_overwrite_by_default(knowledge_base, tmp_path):
    path = tmp_path / "company.yaml"
    path.write_text("features:\n  - Replaced\n", encoding="utf-8")

    assert knowledge_base.seed_from_yaml(path) is False
    assert knowledge_base.lookup("features") == {"features": COMPANY_DOCUMENT["features"]}

    assert knowledge_base.seed_from_yaml(path, overwrite=True) is True
    assert knowledge_base.lookup("features") == {"features": ["Replaced"]}


def test_seed_from_yaml_rejects_non_mapping(database, tmp_path):
    path = tmp_path / "company.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ValueError):
        CompanyKnowledgeBase(database, "Profit Flow").seed_from_yaml(path)


def test_bundled_company_info_file_seeds(database):
    from pathlib import Path

    path = Path(__file__).resolve().parents[2] / "config" / "company_info.yaml"
    kb = CompanyKnowledgeBase(database, "Profit Flow")

    assert kb.seed_from_yaml(path) is True
    document = kb.lookup("all")
    for section in ("features", "pricing", "benefits", "support", "faq"):
        assert document[section]

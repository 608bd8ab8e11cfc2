from pathlib import Path
import sys

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from dbagent.config import Settings


class FakeClient:
    """Stands in for TrinoClient; records every statement it is asked to run."""

    def __init__(self, rows=None, tables=None, error=None):
        self.rows = rows or []
        self.tables = tables or []
        self.error = error
        self.queries = []
        self.catalog_reads = 0

    def query(self, sql):
        self.queries.append(sql)
        if self.error:
            raise self.error
        return [dict(row) for row in self.rows]

    def list_tables(self):
        self.catalog_reads += 1
        if self.error:
            raise self.error
        return list(self.tables)


class StubLLM:
    def __init__(self, text="3 of 4 valid", error=None):
        self.text = text
        self.error = error
        self.prompts = []

    def generate(self, prompt):
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.text


def make_settings(**overrides) -> Settings:
    values = {
        "restricted_context": "false",
        "deployment_target": None,
        "environment": "development",
        "anthropic_base_url": "https://api.anthropic.com",
        "llm_provider": "anthropic",
        "anthropic_api_key": "test-key",
        "openai_api_key": None,
        "log_level": "WARNING",
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def restricted_settings():
    return make_settings(restricted_context="true")


@pytest.fixture
def stub_llm():
    return StubLLM()

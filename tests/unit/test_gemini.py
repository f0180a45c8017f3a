"""Testes do GeminiContentGenerator

genai.Client é um MagicMock; o relógio é controlado pelo teste.
"""

from datetime import date
from unittest.mock import MagicMock

import pytest
from google.genai import types

from biggestor.adapters.gemini import APP_TOOLS, GeminiContentGenerator
from biggestor.domain.errors import AssistantError, AssistantThrottledError


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now


def _response(text="", function_calls=None):
    response = MagicMock()
    response.text = text
    response.function_calls = function_calls
    response.usage_metadata = None
    return response


def _call(name, args):
    call = MagicMock()
    call.name = name
    call.args = args
    return call


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def generator(client, clock):
    return GeminiContentGenerator(
        client=client,
        model="gemini-2.5-flash",
        min_interval=60,
        clock=clock,
        today=lambda: date(2026, 3, 10),
    )


def test_client_required():
    with pytest.raises(ValueError):
        GeminiContentGenerator(client=None)


def test_declares_five_tools():
    assert [t.name for t in APP_TOOLS] == [
        "create_client",
        "create_job",
        "create_contract",
        "update_job_status",
        "create_script",
    ]


class TestChat:
    def test_returns_text_and_tool_calls(self, generator, client, sample_job, sample_client):
        # Arrange
        client.models.generate_content.return_value = _response(
            text="Cliente criado.",
            function_calls=[_call("create_client", {"name": "Ana", "email": "a@e.com"})],
        )

        # Act
        reply = generator.chat("Cadastre a Ana", [sample_job], [sample_client])

        # Assert
        assert reply.text == "Cliente criado."
        assert reply.tool_calls[0].name == "create_client"
        assert reply.tool_calls[0].args == {"name": "Ana", "email": "a@e.com"}

    def test_request_carries_context_tools_and_date(self, generator, client, sample_job, sample_client):
        client.models.generate_content.return_value = _response(text="ok")

        generator.chat("Quais jobs?", [sample_job], [sample_client])

        kwargs = client.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-2.5-flash"
        assert "Cliente: TechCorp" in kwargs["contents"]
        assert "Valor: R$ 3.000,00" in kwargs["contents"]
        assert "Prazo: 20/03/2026" in kwargs["contents"]
        assert kwargs["contents"].endswith("Solicitação do Usuário: Quais jobs?")
        config = kwargs["config"]
        assert isinstance(config, types.GenerateContentConfig)
        assert "10/03/2026" in config.system_instruction
        assert len(config.tools[0].function_declarations) == 5

    def test_empty_context(self, generator, client):
        client.models.generate_content.return_value = _response(text=None)

        reply = generator.chat("Oi", [], [])

        contents = client.models.generate_content.call_args.kwargs["contents"]
        assert "Nenhum job cadastrado." in contents
        assert "Nenhum cliente cadastrado." in contents
        assert reply.text == ""
        assert reply.tool_calls == []

    def test_api_error_is_wrapped(self, generator, client):
        client.models.generate_content.side_effect = RuntimeError("quota")

        with pytest.raises(AssistantError, match="quota"):
            generator.chat("Oi", [], [])


class TestThrottle:
    def test_second_call_within_interval_is_blocked(self, generator, client, clock):
        client.models.generate_content.return_value = _response(text="ok")
        generator.chat("1", [], [])
        clock.now += 20

        with pytest.raises(AssistantThrottledError) as exc_info:
            generator.chat("2", [], [])

        assert exc_info.value.retry_after == pytest.approx(40)
        assert client.models.generate_content.call_count == 1

    def test_call_after_interval_is_allowed(self, generator, client, clock):
        client.models.generate_content.return_value = _response(text="ok")
        generator.chat("1", [], [])
        clock.now += 60

        generator.chat("2", [], [])

        assert client.models.generate_content.call_count == 2

    def test_drafts_share_the_same_limit(self, generator, client, sample_job, sample_client):
        client.models.generate_content.return_value = _response(text="ok")
        generator.draft_contract(sample_job, sample_client)

        with pytest.raises(AssistantThrottledError):
            generator.draft_proposal(sample_job, sample_client)


class TestDrafts:
    def test_contract_prompt(self, generator, client, sample_job, sample_client):
        client.models.generate_content.return_value = _response(text="CONTRATO")

        text = generator.draft_contract(sample_job, sample_client)

        assert text == "CONTRATO"
        prompt = client.models.generate_content.call_args.kwargs["contents"]
        assert "Nome: TechCorp" in prompt
        assert "Valor Total: R$ 3.000,00" in prompt
        assert 'tipo de serviço "Vídeo"' in prompt

    def test_empty_contract_falls_back(self, generator, client, sample_job, sample_client):
        client.models.generate_content.return_value = _response(text="")

        assert generator.draft_contract(sample_job, sample_client) == (
            "Não foi possível gerar o contrato."
        )

    def test_empty_proposal_falls_back(self, generator, client, sample_job, sample_client):
        client.models.generate_content.return_value = _response(text=None)

        assert generator.draft_proposal(sample_job, sample_client) == (
            "Não foi possível gerar a proposta."
        )

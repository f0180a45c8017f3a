"""Gemini Content Generator Adapter

Implementação do ContentGenerator com o SDK google-genai.

- draft_contract / draft_proposal: geração de texto livre
- chat: assistente com function calling (ferramentas que alteram dados do app)

O cliente genai.Client é criado pelo chamador (factory) e injetado aqui.
As chamadas de saída passam por um intervalo mínimo entre requisições.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from datetime import date, datetime

from google import genai
from google.genai import types

from biggestor.domain.errors import AssistantError, AssistantThrottledError
from biggestor.domain.models import AssistantReply, Client, Job, ToolCall
from biggestor.domain.ports import ContentGenerator
from biggestor.services.finance import format_currency

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"


def _string(description: str) -> types.Schema:
    return types.Schema(type=types.Type.STRING, description=description)


def _number(description: str) -> types.Schema:
    return types.Schema(type=types.Type.NUMBER, description=description)


# ── Ferramentas ──────────────────────────────────────────────────────────────

CREATE_CLIENT = types.FunctionDeclaration(
    name="create_client",
    description=(
        "Cria um novo cliente no sistema. Use quando o usuário pedir para "
        "cadastrar, adicionar ou criar um cliente."
    ),
    parameters=types.Schema(
        type=types.Type.OBJECT,
        properties={
            "name": _string("Nome completo do cliente."),
            "email": _string("Email do cliente."),
            "phone": _string("Telefone do cliente (opcional)."),
            "company": _string("Nome da empresa (opcional)."),
        },
        required=["name", "email"],
    ),
)

CREATE_JOB = types.FunctionDeclaration(
    name="create_job",
    description=(
        "Cria um novo job/projeto. Requer um cliente existente. Se o cliente "
        "não existir, peça para criar o cliente primeiro."
    ),
    parameters=types.Schema(
        type=types.Type.OBJECT,
        properties={
            "name": _string("Nome ou título do job."),
            "clientName": _string("Nome do cliente associado."),
            "value": _number("Valor total do job em Reais (apenas números)."),
            "deadline": _string(
                "Prazo de entrega no formato YYYY-MM-DD. Se o usuário disser "
                '"próxima sexta", calcule a data.'
            ),
            "serviceType": _string("Tipo de serviço (Vídeo, Fotografia, Design, Sites, etc)."),
        },
        required=["name", "clientName", "deadline"],
    ),
)

CREATE_CONTRACT = types.FunctionDeclaration(
    name="create_contract",
    description="Cria um novo contrato. Busca o cliente pelo nome.",
    parameters=types.Schema(
        type=types.Type.OBJECT,
        properties={
            "title": _string("Título do contrato (ex: Contrato Social Media)."),
            "clientName": _string("Nome do cliente associado."),
            "content": _string("O texto/cláusulas do contrato."),
        },
        required=["title", "clientName", "content"],
    ),
)

UPDATE_JOB_STATUS = types.FunctionDeclaration(
    name="update_job_status",
    description="Atualiza o status de um job existente.",
    parameters=types.Schema(
        type=types.Type.OBJECT,
        properties={
            "jobName": _string("Nome do job (aproximado)."),
            "newStatus": _string(
                "Novo status (Briefing, Produção, Revisão, Finalizado, Pago, Outros)."
            ),
        },
        required=["jobName", "newStatus"],
    ),
)

CREATE_SCRIPT = types.FunctionDeclaration(
    name="create_script",
    description="Cria um roteiro estruturado e salva nos rascunhos. Gere cenas detalhadas.",
    parameters=types.Schema(
        type=types.Type.OBJECT,
        properties={
            "title": _string("Título do roteiro."),
            "scenes": types.Schema(
                type=types.Type.ARRAY,
                description="Lista de cenas do roteiro.",
                items=types.Schema(
                    type=types.Type.OBJECT,
                    properties={
                        "scene": _string('Número ou título da cena (ex: "Cena 1 - Int.").'),
                        "description": _string("Descrição visual, falas ou ação."),
                        "duration": _number("Duração estimada em segundos."),
                    },
                    required=["scene", "description"],
                ),
            ),
        },
        required=["title", "scenes"],
    ),
)

APP_TOOLS = [CREATE_CLIENT, CREATE_JOB, CREATE_CONTRACT, UPDATE_JOB_STATUS, CREATE_SCRIPT]


def _br_date(value: str) -> str:
    """ISO8601 -> dd/mm/aaaa (valor original se não for uma data)"""
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).strftime("%d/%m/%Y")
    except ValueError:
        return value


class GeminiContentGenerator(ContentGenerator):
    """
    ContentGenerator sobre o Gemini.

    Apenas uma chamada de saída é permitida a cada `min_interval` segundos;
    uma chamada antes disso levanta AssistantThrottledError sem contatar a API.
    """

    def __init__(
        self,
        client: genai.Client,
        model: str = DEFAULT_MODEL,
        min_interval: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
        today: Callable[[], date] = date.today,
    ) -> None:
        """
        Args:
            client: genai.Client já configurado (API key ou Vertex AI)
            model: nome do modelo
            min_interval: intervalo mínimo entre chamadas, em segundos
            clock: relógio monotônico (injetável nos testes)
            today: data atual usada no prompt do assistente
        """
        if client is None:
            raise ValueError("client is required")

        self._client = client
        self._model = model
        self._min_interval = min_interval
        self._clock = clock
        self._today = today
        self._last_call: float | None = None
        self._lock = threading.Lock()

        logger.info("GeminiContentGenerator initialized: model=%s", model)

    def _acquire_slot(self) -> None:
        with self._lock:
            now = self._clock()
            if self._last_call is not None:
                elapsed = now - self._last_call
                if elapsed < self._min_interval:
                    retry_after = self._min_interval - elapsed
                    logger.info("Gemini call throttled: retry_after=%.1fs", retry_after)
                    raise AssistantThrottledError(retry_after)
            self._last_call = now

    def _generate(
        self, contents: str, config: types.GenerateContentConfig | None = None
    ) -> types.GenerateContentResponse:
        self._acquire_slot()
        try:
            response = self._client.models.generate_content(
                model=self._model,
                contents=contents,
                config=config,
            )
        except Exception as e:
            logger.exception("Gemini call failed")
            raise AssistantError(str(e)) from e

        usage = getattr(response, "usage_metadata", None)
        if usage:
            logger.info(
                "Gemini token usage: input=%s, output=%s, total=%s",
                usage.prompt_token_count,
                usage.candidates_token_count,
                usage.total_token_count,
            )
        return response

    # ── Textos ───────────────────────────────────────────────────────────────

    def draft_contract(self, job: Job, client: Client) -> str:
        response = self._generate(self._build_contract_prompt(job, client))
        return response.text or "Não foi possível gerar o contrato."

    def draft_proposal(self, job: Job, client: Client) -> str:
        response = self._generate(self._build_proposal_prompt(job, client))
        return response.text or "Não foi possível gerar a proposta."

    def _build_contract_prompt(self, job: Job, client: Client) -> str:
        return f"""
Aja como um advogado especializado e crie uma minuta de contrato de prestação de serviços.

DADOS DO CLIENTE:
Nome: {client.name}
Empresa: {client.company or 'N/A'}
CPF/CNPJ: {client.cpf or '__________________'}
Email: {client.email}

DADOS DO PROJETO (JOB):
Título: {job.name}
Tipo de Serviço: {job.service_type}
Valor Total: {format_currency(job.value)}
Prazo de Entrega: {_br_date(job.deadline)}
Detalhes/Observações: {job.notes or 'N/A'}

INSTRUÇÕES:
- Crie um contrato formal e completo.
- Inclua cláusulas de objeto, preço, forma de pagamento, prazo, obrigações das partes e rescisão.
- Adapte as cláusulas especificamente para o tipo de serviço "{job.service_type}".
- Use marcadores [Preencher] onde faltarem dados essenciais (como endereço).
- Não use markdown excessivo, formate para ser colado em um editor de texto simples.
"""

    def _build_proposal_prompt(self, job: Job, client: Client) -> str:
        return f"""
Aja como um produtor criativo e escreva uma proposta comercial para o cliente abaixo.

CLIENTE: {client.name} ({client.company or 'pessoa física'})
PROJETO: {job.name}
TIPO DE SERVIÇO: {job.service_type}
INVESTIMENTO: {format_currency(job.value)}
PRAZO: {_br_date(job.deadline)}
OBSERVAÇÕES: {job.notes or 'N/A'}

INSTRUÇÕES:
- Apresente o escopo, as etapas de produção, o cronograma e o investimento.
- Tom profissional e próximo, em Português do Brasil.
- Texto simples, sem markdown excessivo.
"""

    # ── Assistente ───────────────────────────────────────────────────────────

    def chat(self, query: str, jobs: list[Job], clients: list[Client]) -> AssistantReply:
        config = types.GenerateContentConfig(
            system_instruction=self._build_system_instruction(),
            tools=[types.Tool(function_declarations=APP_TOOLS)],
        )
        prompt = f"{self._format_context(jobs, clients)}\nSolicitação do Usuário: {query}"
        response = self._generate(prompt, config)

        tool_calls = [
            ToolCall(name=call.name, args=dict(call.args or {}))
            for call in (response.function_calls or [])
        ]
        logger.info("Assistant reply: tool_calls=%d", len(tool_calls))
        return AssistantReply(text=response.text or "", tool_calls=tool_calls)

    def _build_system_instruction(self) -> str:
        today = self._today()
        return f"""Você é um assistente de IA chamado "Gestor IA" para o sistema BIG.
Sua função é ajudar o usuário a gerenciar jobs, clientes, contratos e criar roteiros criativos.

Você tem permissão para realizar ações reais no sistema usando as ferramentas disponíveis.

REGRAS:
1. Se o usuário pedir para criar algo (cliente, job, contrato, roteiro), USE A FERRAMENTA apropriada. Não apenas diga que vai fazer.
2. Seja conciso e direto.
3. Responda em Português do Brasil.
4. Para datas, hoje é {today.strftime('%d/%m/%Y')} ({today.isoformat()}).
5. Se precisar de mais informações para executar uma ação (ex: falta o email do cliente), pergunte ao usuário.
6. Para roteiros: seja criativo, detalhista nas descrições visuais e sugira durações realistas.
"""

    def _format_context(self, jobs: list[Job], clients: list[Client]) -> str:
        """Dados do sistema enviados ao modelo (sempre com valores reais, sem modo privacidade)"""
        client_names = {c.id: c.name for c in clients}
        lines = ["Dados do Sistema:", "--- Jobs ---"]
        if jobs:
            for job in jobs:
                lines.append(
                    f"ID: {job.id}, Nome: {job.name}, "
                    f"Cliente: {client_names.get(job.client_id, 'Desconhecido')}, "
                    f"Valor: {format_currency(job.value)}, Prazo: {_br_date(job.deadline)}, "
                    f"Status: {job.status.value}, Tipo: {job.service_type}"
                )
        else:
            lines.append("Nenhum job cadastrado.")

        lines += ["", "--- Clientes ---"]
        if clients:
            for client in clients:
                lines.append(
                    f"ID: {client.id}, Nome: {client.name}, "
                    f"Empresa: {client.company or 'N/A'}, Email: {client.email}"
                )
        else:
            lines.append("Nenhum cliente cadastrado.")
        lines.append("---")
        return "\n".join(lines) + "\n"

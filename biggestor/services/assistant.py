"""AssistantService - assistente de IA e execução das ferramentas

Envia a pergunta do usuário ao ContentGenerator e executa no AppDataService
as chamadas de ferramenta devolvidas pelo modelo.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import Any, TypeVar

from biggestor.domain.errors import AssistantError, AssistantThrottledError
from biggestor.domain.models import (
    Client,
    Contract,
    DraftType,
    Job,
    JobStatus,
    ScriptLine,
    ServiceType,
    ToolCall,
    new_id,
)
from biggestor.domain.ports import ContentGenerator
from biggestor.services.app_data import AppDataService

logger = logging.getLogger(__name__)

T = TypeVar("T")

MSG_AI_ERROR = "Ocorreu um erro ao contatar o assistente de IA."


def throttled_message(retry_after: float) -> str:
    seconds = max(1, math.ceil(retry_after))
    return f"Aguarde {seconds} segundos antes de fazer uma nova solicitação à IA."


def _find_by_name(items: list[T], name: str, key: Callable[[T], str]) -> T | None:
    """Busca por nome: igualdade sem diferenciar maiúsculas, depois trecho contido"""
    wanted = name.strip().lower()
    if not wanted:
        return None
    exact = [i for i in items if key(i).lower() == wanted]
    if exact:
        return exact[0]
    partial = [i for i in items if wanted in key(i).lower()]
    return partial[0] if partial else None


@dataclass
class AssistantResult:
    """Resposta do assistente e resumo das ações executadas"""

    text: str
    actions: list[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        if not self.actions:
            return self.text
        summary = "\n".join(f"- {a}" for a in self.actions)
        return f"{self.text}\n\n{summary}".strip()


class AssistantService:
    """
    Assistente da sessão.

    Ferramentas suportadas: create_client, create_job, create_contract,
    update_job_status, create_script. Clientes e jobs são localizados pelo nome.
    """

    def __init__(self, generator: ContentGenerator, app_data: AppDataService) -> None:
        self._generator = generator
        self._app_data = app_data
        self._handlers: dict[str, Callable[[dict[str, Any]], str]] = {
            "create_client": self._create_client,
            "create_job": self._create_job,
            "create_contract": self._create_contract,
            "update_job_status": self._update_job_status,
            "create_script": self._create_script,
        }

    def ask(self, query: str) -> AssistantResult:
        try:
            reply = self._generator.chat(
                query, self._app_data.visible_jobs(), self._app_data.clients
            )
        except AssistantThrottledError as e:
            return AssistantResult(text=throttled_message(e.retry_after))
        except AssistantError as e:
            logger.error("Assistant call failed: %s", e)
            return AssistantResult(text=f"{MSG_AI_ERROR} Detalhes: {e}")

        actions = [self.dispatch(call) for call in reply.tool_calls]
        logger.info("Assistant handled query: actions=%d", len(actions))
        return AssistantResult(text=reply.text, actions=actions)

    def dispatch(self, call: ToolCall) -> str:
        """Executa uma chamada de ferramenta e devolve a descrição do resultado"""
        handler = self._handlers.get(call.name)
        if handler is None:
            logger.warning("Unknown tool call: %s", call.name)
            return f"Ação desconhecida: {call.name}"
        logger.info("Dispatching tool call: %s", call.name)
        return handler(call.args)

    # ── Ferramentas ──────────────────────────────────────────────────────────

    def _find_client(self, name: str) -> Client | None:
        return _find_by_name(self._app_data.clients, name, lambda c: c.name)

    def _create_client(self, args: dict[str, Any]) -> str:
        name = str(args.get("name", ""))
        client = self._app_data.add_client(
            Client(
                name=name,
                email=str(args.get("email", "")),
                phone=args.get("phone") or None,
                company=args.get("company") or None,
            )
        )
        if client is None:
            return f'Não foi possível criar o cliente "{name}".'
        return f'Cliente "{client.name}" criado.'

    def _create_job(self, args: dict[str, Any]) -> str:
        name = str(args.get("name", ""))
        client_name = str(args.get("clientName", ""))
        client = self._find_client(client_name)
        if client is None:
            return f'Cliente "{client_name}" não encontrado. Crie o cliente primeiro.'

        service_type = str(args.get("serviceType") or ServiceType.OTHER.value)
        custom_service_type = None
        if service_type not in {s.value for s in ServiceType}:
            custom_service_type = service_type
            service_type = ServiceType.OTHER.value
        elif service_type == ServiceType.OTHER.value:
            custom_service_type = "Outro"

        deadline = str(args.get("deadline", ""))
        if len(deadline) == 10:
            # prazo no fim do dia, como no formulário de jobs
            deadline = f"{deadline}T23:59:59.000Z"

        try:
            value = float(args.get("value") or 0)
        except (TypeError, ValueError):
            value = 0.0

        job = self._app_data.add_job(
            Job(
                name=name,
                client_id=client.id,
                service_type=service_type,
                custom_service_type=custom_service_type,
                value=value,
                deadline=deadline,
            )
        )
        if job is None:
            return f'Não foi possível criar o job "{name}".'
        return f'Job "{job.name}" criado para {client.name}.'

    def _create_contract(self, args: dict[str, Any]) -> str:
        title = str(args.get("title", ""))
        client_name = str(args.get("clientName", ""))
        client = self._find_client(client_name)
        if client is None:
            return f'Cliente "{client_name}" não encontrado. Crie o cliente primeiro.'
        contract = self._app_data.add_contract(
            Contract(title=title, client_id=client.id, content=str(args.get("content", "")))
        )
        if contract is None:
            return f'Não foi possível criar o contrato "{title}".'
        return f'Contrato "{contract.title}" criado para {client.name}.'

    def _update_job_status(self, args: dict[str, Any]) -> str:
        job_name = str(args.get("jobName", ""))
        new_status = str(args.get("newStatus", ""))
        job = _find_by_name(self._app_data.visible_jobs(), job_name, lambda j: j.name)
        if job is None:
            return f'Job "{job_name}" não encontrado.'
        try:
            status = JobStatus(new_status)
        except ValueError:
            return f'Status inválido: "{new_status}".'
        self._app_data.update_job(replace(job, status=status))
        return f'Status do job "{job.name}" atualizado para {status.value}.'

    def _create_script(self, args: dict[str, Any]) -> str:
        title = str(args.get("title", "Roteiro"))
        draft = self._app_data.add_draft_note(title, DraftType.SCRIPT)
        if draft is None:
            return f'Não foi possível criar o roteiro "{title}".'

        scenes = args.get("scenes")
        lines = []
        for scene in scenes if isinstance(scenes, list) else []:
            if not isinstance(scene, dict):
                logger.warning("Ignoring malformed scene in create_script: %r", scene)
                continue
            try:
                duration = int(float(scene.get("duration") or 0))
            except (TypeError, ValueError):
                duration = 0
            lines.append(
                ScriptLine(
                    id=new_id(),
                    scene=str(scene.get("scene", "")),
                    description=str(scene.get("description", "")),
                    duration=duration,
                )
            )
        self._app_data.update_draft_note(replace(draft, script_lines=lines))
        return f'Roteiro "{title}" salvo nos rascunhos ({len(lines)} cenas).'

    # ── Rascunhos por IA ─────────────────────────────────────────────────────

    def _draft(self, job_id: str, kind: str) -> str:
        job = self._app_data.get_job_by_id(job_id)
        client = self._app_data.get_client_by_id(job.client_id) if job else None
        if job is None or client is None:
            return "Selecione um Cliente e um Job para gerar o contrato."
        try:
            if kind == "contract":
                return self._generator.draft_contract(job, client)
            return self._generator.draft_proposal(job, client)
        except AssistantThrottledError as e:
            return throttled_message(e.retry_after)
        except AssistantError as e:
            logger.error("Draft generation failed: kind=%s, job=%s, error=%s", kind, job_id, e)
            return "Erro ao gerar contrato via IA." if kind == "contract" else "Erro ao gerar proposta via IA."

    def draft_contract(self, job_id: str) -> str:
        return self._draft(job_id, "contract")

    def draft_proposal(self, job_id: str) -> str:
        return self._draft(job_id, "proposal")

#!/usr/bin/env python3
"""CLI Entrypoint - manutenção pela linha de comando

Uso:
    python -m biggestor.entrypoints.cli -u USUARIO export --output ./backups
    python -m biggestor.entrypoints.cli -u USUARIO import big_backup_2026-01-31.json
    python -m biggestor.entrypoints.cli -u USUARIO notifications [--mark-read ID]
    python -m biggestor.entrypoints.cli -u USUARIO ask "Quais jobs estão atrasados?"
    python -m biggestor.entrypoints.cli -u luizmellol licenses list|generate|revoke KEY

Variáveis de ambiente:
    BIG_USERNAME / BIG_PASSWORD: credenciais (alternativa a -u/-p)
    LOG_LEVEL, LOG_FORMAT: ver biggestor.logging_config
"""

import argparse
import getpass
import json
import logging
import os
import sys
from pathlib import Path

from biggestor.entrypoints.factory import Application, create_application
from biggestor.logging_config import setup_logging
from biggestor.services.admin import is_admin
from biggestor.services.finance import format_currency, payment_summary

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="biggestor", description="BIG Gestor - manutenção")
    parser.add_argument("-u", "--username", default=os.getenv("BIG_USERNAME"))
    parser.add_argument("-p", "--password", default=os.getenv("BIG_PASSWORD"))
    sub = parser.add_subparsers(dest="command", required=True)

    export = sub.add_parser("export", help="gera o arquivo de backup")
    export.add_argument("--output", default=".", help="diretório de destino")

    imp = sub.add_parser("import", help="importa um arquivo de backup")
    imp.add_argument("file")

    notif = sub.add_parser("notifications", help="lista as notificações do dia")
    notif.add_argument("--mark-read", metavar="ID")

    sub.add_parser("summary", help="resumo financeiro dos jobs ativos")

    ask = sub.add_parser("ask", help="pergunta ao assistente de IA")
    ask.add_argument("query")

    lic = sub.add_parser("licenses", help="administração de licenças")
    lic_sub = lic.add_subparsers(dest="action", required=True)
    lic_sub.add_parser("list")
    lic_sub.add_parser("generate")
    revoke = lic_sub.add_parser("revoke")
    revoke.add_argument("key")

    return parser


def _login(app: Application, args: argparse.Namespace) -> bool:
    app.auth.restore_session()
    if app.auth.current_user is not None and not args.username:
        return True
    if not args.username:
        logger.error("Username required (-u or BIG_USERNAME)")
        return False
    password = args.password or getpass.getpass("Senha: ")
    error = app.auth.login(args.username, password)
    if error:
        logger.error("Login failed: %s", error)
        return False
    return True


def run(app: Application, args: argparse.Namespace) -> int:
    """Executa o comando já autenticado. Retorna o código de saída"""
    if not _login(app, args):
        return 1
    app_data = app.session.app_data
    user = app.auth.current_user

    if args.command == "export":
        output = Path(args.output)
        output.mkdir(parents=True, exist_ok=True)
        payload = app_data.export_data(output)
        logger.info(
            "Exported %d jobs, %d clients to %s",
            len(payload["data"]["jobs"]),
            len(payload["data"]["clients"]),
            output,
        )
        return 0

    if args.command == "import":
        text = Path(args.file).read_text(encoding="utf-8")
        return 0 if app_data.import_data(text) else 1

    if args.command == "notifications":
        center = app.session.notifications
        if args.mark_read:
            center.mark_as_read(args.mark_read)
        for n in center.notifications(app_data.jobs, app_data.clients):
            flag = " " if n.is_read else "*"
            print(f"{flag} [{n.type}] {n.id}: {n.message}")
        return 0

    if args.command == "summary":
        privacy = app_data.settings.privacy_mode_enabled
        for job in app_data.visible_jobs():
            summary = payment_summary(job)
            print(
                f"{job.name} | {job.status.value} | pago {format_currency(summary.total_paid, privacy)}"
                f" | restante {format_currency(summary.remaining, privacy)}"
            )
        return 0

    if args.command == "ask":
        result = app.assistant().ask(args.query)
        print(result.message)
        return 0

    if args.command == "licenses":
        if not is_admin(user):
            logger.error("License administration is restricted to the admin account")
            return 1
        if args.action == "list":
            for lic in app.licenses.list():
                print(json.dumps(lic.to_dict(), ensure_ascii=False))
        elif args.action == "generate":
            print(app.licenses.generate(created_by=user.username).key)
        elif args.action == "revoke":
            return 0 if app.licenses.revoke(args.key) else 1
        return 0

    logger.error("Unknown command: %s", args.command)
    return 1


def main():
    """Ponto de entrada principal"""
    setup_logging()
    args = build_parser().parse_args()

    try:
        app = create_application()
        sys.exit(run(app, args))

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(130)

    except Exception:
        logger.exception("Fatal error")
        sys.exit(1)


if __name__ == "__main__":
    main()

from __future__ import annotations

from typing import Any

from django.conf import settings
from django.core.management.base import BaseCommand

from medpass_core.adapters.config.composition_root import setup_di_container_from_settings
from medpass_core.core.application.commands.user_commands import CreateUserCommand
from medpass_core.core.application.dtos.user_dto import UserDTO
from medpass_core.core.domain.events.exceptions import DuplicateError


class Command(BaseCommand):
    """
    Cria o usuário da matriz (papel `matriz`).
    Idempotente: e-mail já cadastrado apenas gera um aviso.
    """
    help = "Cria o usuário administrador da matriz."

    def add_arguments(self, parser) -> None:
        parser.add_argument("--email", type=str, required=True, help="E-mail de login.")
        parser.add_argument("--password", type=str, required=True, help="Senha inicial.")
        parser.add_argument("--name", type=str, default="Administrador Matriz", help="Nome exibido.")

    def handle(self, *args: Any, **opt: Any) -> None:
        self.stdout.write(self.style.NOTICE("--- Iniciando criação do usuário da matriz ---"))

        cmd_bus = setup_di_container_from_settings(settings).command_bus()
        payload = UserDTO(
            email=opt["email"],
            password=opt["password"],
            name=opt["name"],
            role="matriz",
        )

        try:
            result = cmd_bus.dispatch(CreateUserCommand(payload=payload))
        except DuplicateError:
            self.stdout.write(self.style.WARNING(f"Usuário '{opt['email']}' já existe; nada a fazer."))
            return
        self.stdout.write(self.style.SUCCESS(f"✅ Usuário '{result.email}' criado. ID: {result.id}"))

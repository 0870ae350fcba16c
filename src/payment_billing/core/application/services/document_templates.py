"""
Templates (sintaxe Django) do contrato de adesão e dos e-mails enviados
ao beneficiário. Renderizados por `render_message`.
"""
from __future__ import annotations

from typing import Any

from django.utils import timezone

from medpass_core.core.domain.entities.beneficiary_entity import BeneficiaryEntity
from medpass_core.core.domain.entities.plan_entity import PlanEntity
from medpass_core.core.domain.services.validators import format_cpf
from payment_billing.core.utils.template_utils import format_brl, render_message

LOYALTY_MONTHS = 12
EARLY_TERMINATION_PENALTY_PERCENT = 50
DEFAULT_SIGNATURE_PLACE = "Umuarama/PR"

MONTHS_PT = (
    "janeiro", "fevereiro", "março", "abril", "maio", "junho",
    "julho", "agosto", "setembro", "outubro", "novembro", "dezembro",
)

CONTRACT_TEMPLATE = """<!DOCTYPE html>
<html lang="pt-BR">
<head>
<meta charset="UTF-8">
<title>Contrato de Adesão MedPass</title>
<style>
  body { font-family: Arial, sans-serif; font-size: 11pt; line-height: 1.5; margin: 40px; }
  h1 { font-size: 14pt; text-align: center; }
  h2 { font-size: 12pt; margin-top: 18px; }
  .highlight { background: #fff3cd; }
  .footer { font-size: 8pt; color: #666; text-align: center; margin-top: 40px; }
</style>
</head>
<body>
<h1>CONTRATO DE FIDELIZAÇÃO DE PLANOS DE ASSISTÊNCIA À SAÚDE MEDPASS</h1>

<p>Pelo presente instrumento particular, de um lado:</p>
<p><strong>MEDPASS – MULTI BENEFÍCIOS LTDA</strong>, inscrita no CNPJ sob o nº 54.638.988/0001-48,
doravante denominada <strong>CONTRATADA</strong>;</p>
<p>E, de outro lado:</p>
<p><strong class="highlight">{{ nome }}</strong>, CPF: <strong class="highlight">{{ cpf }}</strong>,
Endereço: <strong class="highlight">{{ endereco }}</strong>, doravante denominado <strong>CONTRATANTE</strong>;</p>

<h2>CLÁUSULA 1 – DO OBJETO</h2>
<p>Adesão do CONTRATANTE ao plano de assistência à saúde MedPass na modalidade
<strong>{{ plano }}</strong>, com os benefícios descritos em regulamento próprio.</p>

<h2>CLÁUSULA 2 – DA FIDELIZAÇÃO</h2>
<p>O CONTRATANTE permanecerá vinculado ao plano pelo prazo mínimo de <strong>{{ prazo }}</strong> meses,
contados da assinatura deste contrato, com renovação automática.</p>

<h2>CLÁUSULA 3 – DO PAGAMENTO</h2>
<p>3.1. Valor mensal de <strong>{{ valor }}</strong>, referente ao plano contratado.</p>
<p>3.2. O atraso superior a 30 (trinta) dias poderá suspender os serviços até a regularização.</p>

<h2>CLÁUSULA 4 – DA MULTA POR RESCISÃO ANTECIPADA</h2>
<p>Rescisão antes do término da fidelização sujeita o CONTRATANTE à multa de
<strong>{{ multa }}%</strong> das mensalidades vincendas, salvo descumprimento da CONTRATADA.</p>

<h2>CLÁUSULA 5 – DAS DISPOSIÇÕES GERAIS</h2>
<p>Este contrato não substitui plano de saúde ou seguro saúde. Fica eleito o foro da comarca de Umuarama/PR.</p>

<p style="text-align: right;"><strong>Local:</strong> {{ local }} &nbsp; <strong>Data:</strong> {{ data }}</p>

<p><strong>CONTRATANTE</strong><br>{{ nome }}<br>CPF: {{ cpf }}</p>
<p><strong>CONTRATADA</strong><br>MEDPASS – MULTI BENEFÍCIOS LTDA</p>

<p class="footer">Documento assinado digitalmente via Autentique.com.br</p>
</body>
</html>
"""

SIGNATURE_EMAIL_SUBJECT = "MedPass: assine seu contrato de adesão"
SIGNATURE_EMAIL_TEMPLATE = """
<p>Olá {{ nome }},</p>
<p>Seu contrato de adesão ao plano <strong>{{ plano }}</strong> está pronto para assinatura.</p>
<p><a href="{{ link }}">Clique aqui para assinar</a></p>
<p>Equipe MedPass</p>
"""

PAYMENT_EMAIL_SUBJECT = "MedPass: contrato assinado, finalize seu pagamento"
PAYMENT_EMAIL_TEMPLATE = """
<p>Olá {{ nome }},</p>
<p>Recebemos seu contrato assinado. Para ativar o plano <strong>{{ plano }}</strong>
({{ valor }}/mês), conclua o pagamento:</p>
<p><a href="{{ link }}">Pagar agora</a></p>
<p>Equipe MedPass</p>
"""


def _long_date() -> str:
    today = timezone.localdate()
    return f"{today.day:02d} de {MONTHS_PT[today.month - 1]} de {today.year}"


def _full_address(ben: BeneficiaryEntity) -> str:
    parts = [ben.address, ben.city, ben.state, f"CEP: {ben.cep}" if ben.cep else ""]
    return ", ".join(p for p in parts if p) or "Não informado"


def contract_context(ben: BeneficiaryEntity, plan: PlanEntity) -> dict[str, Any]:
    return {
        "nome": ben.name,
        "cpf": format_cpf(ben.cpf),
        "endereco": _full_address(ben),
        "plano": plan.name,
        "valor": format_brl(ben.plan_value or plan.price),
        "prazo": LOYALTY_MONTHS,
        "multa": EARLY_TERMINATION_PENALTY_PERCENT,
        "local": f"{ben.city}/{ben.state}" if ben.city and ben.state else DEFAULT_SIGNATURE_PLACE,
        "data": _long_date(),
    }


def render_contract(ben: BeneficiaryEntity, plan: PlanEntity) -> str:
    return render_message(CONTRACT_TEMPLATE, contract_context(ben, plan))


def render_signature_email(ben: BeneficiaryEntity, plan: PlanEntity, link: str) -> str:
    return render_message(SIGNATURE_EMAIL_TEMPLATE, {"nome": ben.name, "plano": plan.name, "link": link})


def render_payment_email(ben: BeneficiaryEntity, plan: PlanEntity, link: str) -> str:
    return render_message(
        PAYMENT_EMAIL_TEMPLATE,
        {"nome": ben.name, "plano": plan.name, "valor": format_brl(ben.plan_value or plan.price), "link": link},
    )

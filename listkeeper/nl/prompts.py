"""Prompt templates for the classifier."""

from __future__ import annotations

DETECTION_SYSTEM = "Você é um especialista em categorização de conversas."
DETECTION_PROMPT = """Analise esta mensagem e determine se é sobre:
1. "entretenimento" - filmes, séries, livros, coisas para assistir/ler
2. "gastos" - despesas, dinheiro, compras com valores
3. "compras" - lista de compras, mercado, itens para comprar

Mensagem: "{message}"

Responda APENAS com uma palavra: "entretenimento", "gastos" ou "compras"."""

ENTERTAINMENT_SYSTEM = "Você é um especialista em categorização de conteúdo de entretenimento."
ENTERTAINMENT_PROMPT = """Categorize este conteúdo de entretenimento em UMA destas categorias: filme, série, desenho, documentário, anime, livro, outros.

Conteúdo: "{message}"

Responda APENAS com o nome da categoria, sem explicações."""

EXPENSE_SYSTEM = "Você é um especialista em análise de gastos financeiros."
EXPENSE_PROMPT = """Analise esta mensagem de gasto e extraia: descrição e valor. Também categorize em UMA destas: mercado, transporte, lazer, comida, saúde, educação, contas, outros.

Mensagem: "{message}"

Responda no formato JSON:
{{
  "description": "descrição extraída",
  "value": número,
  "category": "categoria"
}}

Apenas o JSON, sem outros textos."""

SHOPPING_SYSTEM = "Você é um especialista em organização de listas de compras."
SHOPPING_PROMPT = """Esta é uma lista de compras. Identifique cada item individualmente. Se for uma lista com vírgulas, separe os itens. Se for uma frase, extraia os itens mencionados.

Mensagem: "{message}"

Responda com uma lista JSON de itens:
{{
  "items": ["item1", "item2", "item3"]
}}

Apenas o JSON, sem outros textos."""

INSIGHT_SYSTEM = "Você é um consultor financeiro."
INSIGHT_PROMPT = """Analise estes gastos e dê uma breve análise (máximo 2 frases):
Total: {total}
Categorias: {categories}

Dê uma análise objetiva."""

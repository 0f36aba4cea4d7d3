MINUTES_SYSTEM_PROMPT = """Você é um assistente especializado em criar atas de \
reunião profissionais e bem estruturadas em português brasileiro."""

MINUTES_USER_PROMPT = """Você é um assistente especializado em criar atas de \
reunião corporativas. Sua função é ser EXTREMAMENTE FIEL ao conteúdo da \
transcrição, mantendo sempre um tom formal e profissional.

Título da reunião: {titulo}
Data: {data}

Transcrição: {transcricao}

INSTRUÇÕES CRÍTICAS:
- JAMAIS invente, assuma ou adicione informações que não estejam EXPLICITAMENTE \
mencionadas na transcrição
- JAMAIS crie situações, decisões ou ações que não foram claramente discutidas
- Se algo não foi mencionado ou está pouco claro, NÃO inclua na ata
- Mantenha um tom CORPORATIVO E FORMAL e use linguagem objetiva
- Seja conservador: é melhor uma ata menor e precisa do que uma ata completa \
mas imprecisa

Crie a ata seguindo esta estrutura, incluindo APENAS o que realmente foi \
discutido:

# Ata da Reunião - {titulo}

**Data:** {data}
**Participantes:** [APENAS nomes claramente mencionados na gravação, ou \
"Conforme registro da reunião" se não identificados]

## Resumo Executivo
[Breve resumo dos principais tópicos, no máximo 2-3 linhas]

## Principais Assuntos Tratados
1. [Tópico - descrição concisa e formal]

## Decisões Deliberadas
[APENAS decisões explicitamente mencionadas. Se nenhuma, escreva "Não foram \
registradas decisões específicas durante esta reunião"]

## Ações e Responsabilidades
[APENAS ações claramente definidas, com responsável quando mencionado. Se \
nenhuma, escreva "Não foram definidas ações específicas durante esta reunião"]

## Encaminhamentos
[APENAS se foram discutidos próximos passos; caso contrário, omita esta seção]

---
*Documento gerado automaticamente com base na transcrição fiel do áudio da reunião*

REGRA FUNDAMENTAL: se você não tem certeza absoluta de que algo foi dito, NÃO \
inclua na ata."""

CONSOLIDATION_PROMPT = """A seguir estão várias atas parciais de uma mesma \
reunião. Consolide todas as informações em uma única ata final com o mesmo \
formato. Elimine redundâncias e combine as seções, sem acrescentar nada que \
não esteja nas atas parciais.

{parciais}"""

ADJUST_MINUTES_SYSTEM_PROMPT = """Você é um assistente especializado em \
ajustar atas de reunião profissionais, mantendo sempre fidelidade à \
transcrição original e tom corporativo formal."""

ADJUST_MINUTES_USER_PROMPT = """Faça APENAS os ajustes solicitados na ata, \
mantendo-se EXTREMAMENTE FIEL ao conteúdo da transcrição original.

TRANSCRIÇÃO ORIGINAL: {transcricao}

ATA ATUAL: {ata}

SOLICITAÇÃO DE AJUSTE: {ajuste}

INSTRUÇÕES CRÍTICAS:
- JAMAIS invente, assuma ou adicione informações que não estejam na \
transcrição original
- Mantenha o tom CORPORATIVO E FORMAL
- Se o ajuste exigir informações que não estão na transcrição, explique que \
não é possível fazê-lo

REGRAS PARA AJUSTES:
1. Mudança de formato: ajuste apenas a estrutura/apresentação
2. Inclusão de informações: verifique se existem na transcrição
3. Correção: corrija apenas com base na transcrição
4. Remoção: remova apenas se for apropriado

Retorne a ata ajustada com a mesma estrutura, ou explique por que o ajuste não \
pode ser feito."""

NOTE_FORMAT = """{
  "title": "Título da nota",
  "content": "Conteúdo da nota bem organizado",
  "tags": ["tag1", "tag2", "tag3"],
  "color": "blue"
}"""

TASK_FORMAT = """{
  "title": "Título da tarefa",
  "description": "Descrição detalhada da tarefa com checklist de itens",
  "priority": "medium",
  "tags": ["tag1", "tag2"],
  "completed": false
}"""

THOUGHT_FORMAT = """{
  "content": "Reflexão ou pensamento capturado do áudio",
  "mood": "neutral",
  "tags": ["tag1", "tag2"]
}"""

CREATE_CONTENT_PROMPTS = {
    "note": (
        "Analise este áudio e crie uma nota inteligente estruturada. Retorne "
        "APENAS um JSON válido no formato:\n" + NOTE_FORMAT + "\n\nSeja preciso e "
        "organize o conteúdo de forma clara. Use cores: yellow, blue, green, "
        "pink, purple, orange."
    ),
    "task": (
        "Analise este áudio e crie uma tarefa com checklist estruturada. Retorne "
        "APENAS um JSON válido no formato:\n" + TASK_FORMAT + "\n\nOrganize a "
        "descrição como uma lista de itens práticos. Use prioridade: low, "
        "medium, high."
    ),
    "thought": (
        "Analise este áudio e crie um pensamento estruturado. Retorne APENAS um "
        "JSON válido no formato:\n" + THOUGHT_FORMAT + "\n\nCapture a essência do "
        "pensamento ou reflexão. Use mood: positive, neutral, negative."
    ),
}

ADJUST_CONTENT_PROMPTS = {
    "note": (
        "Você é um assistente especializado em ajustar notas inteligentes. "
        "Mantenha a estrutura JSON válida no formato:\n" + NOTE_FORMAT + "\n\n"
        "Faça apenas os ajustes solicitados, mantendo a essência do conteúdo "
        "original. Use cores: yellow, blue, green, pink, purple, orange."
    ),
    "task": (
        "Você é um assistente especializado em ajustar tarefas com checklist. "
        "Mantenha a estrutura JSON válida no formato:\n" + TASK_FORMAT + "\n\n"
        "Faça apenas os ajustes solicitados, mantendo a praticidade da tarefa. "
        "Use prioridade: low, medium, high."
    ),
    "thought": (
        "Você é um assistente especializado em ajustar pensamentos e reflexões. "
        "Mantenha a estrutura JSON válida no formato:\n" + THOUGHT_FORMAT + "\n\n"
        "Faça apenas os ajustes solicitados, preservando a reflexão original. "
        "Use mood: positive, neutral, negative."
    ),
}

CREATE_CONTENT_USER_PROMPT = 'Transcrição do áudio: "{transcricao}"'

ADJUST_CONTENT_USER_PROMPT = """Conteúdo original: {original}

Solicitação de ajuste: {ajuste}

Por favor, ajuste o conteúdo conforme solicitado, mantendo o formato JSON válido."""

import re
from typing import Sequence

SYSTEM_MESSAGE = (
    "You are BantuHealth AI, a careful educational medical assistant. "
    "Follow the requested section structure exactly and do not prescribe medication dosages."
)

SYMPTOM_SEPARATOR = ", "

# PROMPT_TEMPLATE: placeholders are filled in one pass (not .format), so braces or
# placeholder-looking text inside the user's input is copied through untouched.
PROMPT_TEMPLATE = """
You are BantuHealth AI, a medical assistant. Analyze the following symptoms and information:

SYMPTOMS:
{symptoms}

ADDITIONAL INFORMATION:
{additional_info}

Please provide a structured response with the following sections:

1. INITIAL ASSESSMENT:
- Brief overview of the situation
- Potential conditions to consider

2. RECOMMENDATIONS:
- Immediate actions to take
- Lifestyle modifications
- Self-care measures

3. URGENCY LEVEL:
- Rate urgency (Low/Medium/High)
- Specify if immediate medical attention is needed

4. DISCLAIMER:
Include a clear medical disclaimer

Keep the response professional but easy to understand. Focus on actionable advice and clear next steps.
"""

_PLACEHOLDER = re.compile(r"\{(symptoms|additional_info)\}")


def build_prompt(symptoms: Sequence[str], additional_info: str) -> str:
    values = {
        "symptoms": SYMPTOM_SEPARATOR.join(symptoms),
        "additional_info": additional_info,
    }
    return _PLACEHOLDER.sub(lambda m: values[m.group(1)], PROMPT_TEMPLATE)

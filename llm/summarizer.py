import os
import re
import logging
import openai

from models import AISummary

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_MODEL = "google/gemini-2.0-flash-001"
UNKNOWN_COMPLEXITY = "O(?)"

SOLUTION_LABEL = "פתרון"
TIME_LABEL = "זמן"
SPACE_LABEL = "מקום"

# Solution runs until a line starting with the time/space label, or the end of the text
_SOLUTION_RE = re.compile(rf"{SOLUTION_LABEL}:\s*(.+?)(?=\n(?:{TIME_LABEL}|{SPACE_LABEL}):|\Z)", re.S)
_TIME_RE = re.compile(rf"{TIME_LABEL}:\s*(O\([^)]+\))")
_SPACE_RE = re.compile(rf"{SPACE_LABEL}:\s*(O\([^)]+\))")

PROMPT_TEMPLATE = """You are a LeetCode expert. Given this problem:

Title: {title}
Difficulty: {difficulty}
URL: https://leetcode.com/problems/{title_slug}

Respond in Hebrew with ONLY this exact format (no extra text):

פתרון: [1-2 sentences describing the optimal approach]
זמן: O([complexity])
מקום: O([complexity])"""

logger = logging.getLogger(__name__)


class SummaryError(Exception):
    pass


class SummaryConfigError(SummaryError, ValueError):
    """The summarizer cannot run at all (missing credential)."""


class SummaryUnavailableError(SummaryError):
    """The upstream model call failed."""


def parse_summary_response(content: str) -> AISummary:
    """
    Parses the fixed-format model reply into an AISummary.
    Missing complexities become "O(?)"; a reply without the solution label
    is used whole as the solution.
    """
    solution_match = _SOLUTION_RE.search(content)
    time_match = _TIME_RE.search(content)
    space_match = _SPACE_RE.search(content)

    solution = solution_match.group(1).strip() if solution_match else ""
    return AISummary(
        solution=solution or content.strip(),
        time_complexity=time_match.group(1) if time_match else UNKNOWN_COMPLEXITY,
        space_complexity=space_match.group(1) if space_match else UNKNOWN_COMPLEXITY,
    )


class Summarizer:
    def __init__(self, api_key: str = None, model: str = None, client=None):
        api_key = api_key or os.getenv("OPENROUTER_API_KEY")
        if not api_key and client is None:
            raise SummaryConfigError("OPENROUTER_API_KEY not found in environment.")
        self.model = model or os.getenv("OPENROUTER_MODEL", DEFAULT_MODEL)
        self.client = client or openai.AsyncClient(
            api_key=api_key,
            base_url=OPENROUTER_BASE_URL,
            default_headers={
                "HTTP-Referer": "https://leetcode-question-retriever.web.app",
                "X-Title": "LeetCode Question Retriever",
            },
        )

    async def get_summary(self, title: str, difficulty: str, title_slug: str) -> AISummary:
        """
        Asks the model for a short solution outline with complexities.
        Raises SummaryUnavailableError on any API or transport failure.
        """
        prompt = PROMPT_TEMPLATE.format(title=title, difficulty=difficulty, title_slug=title_slug)

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=300,
                temperature=0.3
            )
        except openai.OpenAIError as e:
            logger.error(f"OpenRouter API error: {e}", exc_info=True)
            raise SummaryUnavailableError("Failed to generate summary") from e

        content = ""
        if response.choices and response.choices[0].message is not None:
            content = response.choices[0].message.content or ""

        summary = parse_summary_response(content)
        logger.info(f"AI summary received for '{title}'")
        return summary

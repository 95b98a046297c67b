import asyncio
import json
import logging
from typing import Awaitable, Callable, List, Optional

from agents.llm_client import LLMCall
from models import DiffFile, DiffHunk, RawSuggestion, ReviewContext

logger = logging.getLogger(__name__)

SYSTEM_INSTRUCTION = "You are a code review assistant. Respond in JSON format."

# prompt -> suggestions, or None when the model call failed
InferenceFn = Callable[[str], Awaitable[Optional[List[RawSuggestion]]]]


def _numbered_changes(hunk: DiffHunk) -> str:
    return "\n".join(f"{c.line_no} {c.marker}{c.content}" for c in hunk.changes)


def build_review_prompt(file: DiffFile, hunk: DiffHunk, context: ReviewContext) -> str:
    return f"""Your task is to review pull requests. Instructions:
- Provide the response in following JSON format:  {{"reviews": [{{"lineNumber":  <line_number>, "reviewComment": "<review comment>"}}]}}
- Do not give positive comments or compliments.
- Provide comments and suggestions ONLY if there is something to improve, otherwise "reviews" should be an empty array.
- Write the comment in GitHub Markdown format.
- Use the given description only for the overall context and only comment the code.
- IMPORTANT: NEVER suggest adding comments to the code.

Review the following code diff in the file "{file.target_path}" and take the pull request title and description into account when writing the response.

Pull request title: {context.title}
Pull request description:

---
{context.description}
---

Git diff to review (each line is prefixed with its line number in the new version of the file):

```diff
{hunk.header}
{_numbered_changes(hunk)}
```
"""


def _load_json(text: str):
    """
    Parse the model body, falling back to the outermost {...} span for
    models that wrap the object in prose or a code fence.
    """
    try:
        return json.loads(text)
    except ValueError:
        pass
    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        return json.loads(text[start:end + 1])
    raise ValueError("No JSON object found in model output")


def parse_reviews(text: str) -> Optional[List[RawSuggestion]]:
    """
    Decode the model body ``{"reviews": [...]}``.
    A missing ``reviews`` key means no suggestions; anything structurally
    wrong returns None.
    """
    try:
        payload = _load_json(text or "{}")
    except (TypeError, ValueError):
        logger.warning("Model returned non-JSON body: %.200s", text)
        return None
    if not isinstance(payload, dict):
        logger.warning("Model returned a %s instead of an object", type(payload).__name__)
        return None
    reviews = payload.get("reviews")
    if reviews is None:
        return []
    if not isinstance(reviews, list):
        logger.warning("Model 'reviews' field is not a list")
        return None
    return [RawSuggestion.model_validate(r) for r in reviews if isinstance(r, dict)]


async def review_hunk(prompt: str, llm: LLMCall,
                      timeout: Optional[float] = None) -> Optional[List[RawSuggestion]]:
    try:
        call = llm(prompt, SYSTEM_INSTRUCTION)
        text = await (asyncio.wait_for(call, timeout) if timeout else call)
    except asyncio.TimeoutError:
        logger.warning("Model call timed out after %ss", timeout)
        return None
    except Exception as e:
        logger.warning("Model call failed: %s", e)
        return None
    return parse_reviews(text)


def make_inference(llm: LLMCall, timeout: Optional[float] = None) -> InferenceFn:
    async def infer(prompt: str) -> Optional[List[RawSuggestion]]:
        return await review_hunk(prompt, llm, timeout=timeout)
    return infer

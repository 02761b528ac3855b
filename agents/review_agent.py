from typing import Optional

from errors import ModelInvocationError
from line_resolver import eligible_lines, resolve_line_number
from models import DiffFile, DiffHunk, PRContext, ReviewFailure, ReviewResult
from .response_parser import parse_review_response


def _annotated_hunk(hunk: DiffHunk) -> str:
    lines = [hunk.header]
    for change in hunk.changes:
        lines.append(f"{resolve_line_number(change)} {change.marker}{change.content}")
    return "\n".join(lines)


def build_review_prompt(file: DiffFile, hunk: DiffHunk, pr: PRContext,
                        full_file_content: Optional[str] = None) -> str:
    context_section = (
        f"\nFull file context:\n```\n{full_file_content}\n```\n" if full_file_content else ""
    )
    changed_lines = ", ".join(str(n) for n in sorted(eligible_lines(hunk)))

    return f"""You are an expert code reviewer focused on identifying only critical issues. Instructions:

- Provide the response in following JSON format: {{"reviews": [{{"lineNumber": <line_number>, "reviewComment": "<review comment>"}}]}}
- ONLY comment on the most critical issues that fall into these categories:
  1. High-impact bugs that could cause system failures or data corruption
  2. Critical security vulnerabilities that could lead to exploits
  3. Severe performance issues that could cause system bottlenecks
  4. Major architectural flaws that significantly impact maintainability
  5. Critical business logic flaws that could lead to system misbehavior
- You may only comment on the following changed line numbers: {changed_lines}
- Completely ignore:
  * Style issues or formatting
  * Documentation
  * Minor optimizations
  * Naming conventions
  * Code organization suggestions
  * Any issue that isn't immediately critical
- Only provide comments when you are highly confident (90%+) that the issue is severe
- Write comments in GitHub Markdown format
- Be direct and specific about the severe impact of each issue
- If you don't find any critical issues, return an empty reviews array

Review the following code diff in the file "{file.path_to}" considering the pull request context:

Pull request title: {pr.title}
Pull request description:

---
{pr.description}
---
{context_section}
Git diff to review:

```diff
{_annotated_hunk(hunk)}
```
"""


async def review_hunk(llm, file: DiffFile, hunk: DiffHunk, pr: PRContext,
                      full_file_content: Optional[str] = None) -> ReviewResult:
    """Ask the model about one hunk. Never raises for model or format problems."""
    prompt = build_review_prompt(file, hunk, pr, full_file_content)
    try:
        raw = await llm.generate(prompt)
    except ModelInvocationError as e:
        return ReviewFailure(reason=f"model invocation failed: {e}")

    return parse_review_response(raw)

import pytest

from config import ReviewConfig

ADDITION_DIFF = (
    "diff --git a/b.txt b/b.txt\n"
    "index 1111111..2222222 100644\n"
    "--- a/b.txt\n"
    "+++ b/b.txt\n"
    "@@ -8,3 +8,4 @@ def ratio(a, b):\n"
    " line8\n"
    " line9\n"
    "+    return a / b\n"
    " line10\n"
)

DELETION_DIFF = (
    "diff --git a/src/app.py b/src/app.py\n"
    "--- a/src/app.py\n"
    "+++ b/src/app.py\n"
    "@@ -1,3 +1,2 @@\n"
    " keep\n"
    "-gone\n"
    " tail\n"
)

DELETED_FILE_DIFF = (
    "diff --git a/old.py b/old.py\n"
    "deleted file mode 100644\n"
    "index 3333333..0000000\n"
    "--- a/old.py\n"
    "+++ /dev/null\n"
    "@@ -1,2 +0,0 @@\n"
    "-x = 1\n"
    "-y = 2\n"
)

MARKDOWN_DIFF = (
    "diff --git a/a.md b/a.md\n"
    "--- a/a.md\n"
    "+++ b/a.md\n"
    "@@ -1,1 +1,2 @@\n"
    " # Title\n"
    "+Some text\n"
)


@pytest.fixture
def config():
    return ReviewConfig(
        github_token="gh-token",
        gemini_api_key="gemini-key",
        model_name="gemini-2.0-flash",
    )

import pytest

from models import RawSuggestion, ReviewContext

SCENARIO_DIFF = """\
diff --git a/a.py b/a.py
index 1111111..2222222 100644
--- a/a.py
+++ b/a.py
@@ -8,3 +8,4 @@ def main():
 a = 0
 b = 1
+x=1
 return a
diff --git a/b.py b/b.py
deleted file mode 100644
index 3333333..0000000
--- a/b.py
+++ /dev/null
@@ -1,2 +0,0 @@
-print("b")
-print("bye")
"""

MULTI_DIFF = """\
diff --git a/src/app.py b/src/app.py
index 1111111..2222222 100644
--- a/src/app.py
+++ b/src/app.py
@@ -1,4 +1,4 @@ import os
 import os
-import sys
+import json
 
 def run():
@@ -20,2 +20,4 @@ def run():
     value = compute()
+    if value is None:
+        return
     return value
diff --git a/docs/README.md b/docs/README.md
index 4444444..5555555 100644
--- a/docs/README.md
+++ b/docs/README.md
@@ -1,1 +1,2 @@
 # Title
+More docs.
diff --git a/new_module.py b/new_module.py
new file mode 100644
index 0000000..6666666
--- /dev/null
+++ b/new_module.py
@@ -0,0 +1,2 @@
+def hello():
+    return "hi"
diff --git a/assets/logo.png b/assets/logo.png
index 7777777..8888888 100644
Binary files a/assets/logo.png and b/assets/logo.png differ
diff --git a/old_name.py b/new_name.py
similarity index 100%
rename from old_name.py
rename to new_name.py
"""


@pytest.fixture
def context():
    return ReviewContext(
        owner="octo",
        repo="widgets",
        pull_number=7,
        title="Add x",
        description="Introduces x.",
    )


def suggestion(line_number, comment="fix this"):
    return RawSuggestion(lineNumber=line_number, reviewComment=comment)


class FakeInference:
    """Returns queued answers in call order and records every prompt."""

    def __init__(self, *answers):
        self.answers = list(answers)
        self.prompts = []

    async def __call__(self, prompt):
        self.prompts.append(prompt)
        answer = self.answers.pop(0) if self.answers else []
        if isinstance(answer, Exception):
            raise answer
        return answer

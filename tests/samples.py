"""Sample diff texts shared by the tests."""

# Two-file git diff: a modification and a rename with content changes
GIT_DIFF = """\
diff --git a/src/app.py b/src/app.py
index 1111111..2222222 100644
--- a/src/app.py
+++ b/src/app.py
@@ -1,4 +1,5 @@ def main():
 import os
-import sys
+import re
+import json
 x = 1
 print("hi")
diff --git a/old_name.py b/new_name.py
similarity index 90%
rename from old_name.py
rename to new_name.py
index 3333333..4444444 100644
--- a/old_name.py
+++ b/new_name.py
@@ -10,3 +10,3 @@ class Thing:
     a = 1
-    b = 2
+    b = 3
     c = 4
"""

# Headerless hunk from the unified diff format docs
PLAIN_HUNK = """\
--- a/x
+++ b/x
@@ -1,3 +1,4 @@
 a
-b
+B
+C
 c
"""

NEW_FILE_DIFF = """\
diff --git a/new.txt b/new.txt
new file mode 100644
index 0000000..5555555
--- /dev/null
+++ b/new.txt
@@ -0,0 +1,2 @@
+first
+second
"""

DELETED_FILE_DIFF = """\
diff --git a/gone.txt b/gone.txt
deleted file mode 100644
index 5555555..0000000
--- a/gone.txt
+++ /dev/null
@@ -1,2 +0,0 @@
-first
-second
"""

BINARY_DIFF = """\
diff --git a/logo.png b/logo.png
new file mode 100644
index 0000000..6666666
Binary files /dev/null and b/logo.png differ
"""

PURE_RENAME_DIFF = """\
diff --git a/a.txt b/b.txt
similarity index 100%
rename from a.txt
rename to b.txt
"""

TIMESTAMP = "2026-01-15T10:30:00+00:00"

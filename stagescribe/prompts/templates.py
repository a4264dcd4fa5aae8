"""Instruction templates for commit message generation.

Every template contains a {diff} placeholder for the concatenated file
diffs. The localized template also takes {language}, filled in when the
prompt is composed.
"""

# Asks for a commit message without constraining its language or format
GENERIC_TEMPLATE = """Given the following diff of staged changes in a Git repository, generate a commit message:

{diff}

Commit message:"""

# Fixes the output language and explains the per-file headers
LOCALIZED_TEMPLATE = """Given the following diff of staged changes in a Git repository, write a commit message in {language}.
Each file starts with a "diff --git" header followed by "--- a/<path>" and "+++ b/<path>" lines.
Lines starting with "+" were added, lines starting with "-" were removed.
Reply with the commit message only: a short summary line, optionally followed by a blank line and a body.

{diff}

Commit message:"""

BUILTIN_TEMPLATES = {
    "generic": GENERIC_TEMPLATE,
    "localized": LOCALIZED_TEMPLATE,
}

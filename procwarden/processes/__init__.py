"""Process supervision — a bounded table of external commands.

This package provides:
- tokenize: split a shell-like command string into an argument vector
- ProcessList: register, launch, reap and escalate-kill commands
- summary_result / summary_result_short: aggregate pass/fail verdicts
"""

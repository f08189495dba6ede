"""runawk - shebang-friendly launcher for awk interpreters.

Rewrites a portable invocation into the wrapped interpreter's argv and
supervises the interpreter as a child process.
"""

__version__ = "0.30.0"

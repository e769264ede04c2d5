"""Input/output of election call scripts and event logs.

This subpackage is structured into modules by file format. The
:mod:`script` module reads operation scripts - plain text files with one
election call per line - and writes event logs in a matching text form.
"""

"""Core package of the resume builder application.

Holds configuration, authentication, security helpers and the application
error types. The functionality lives in the submodules; this file only marks
the package.

"""

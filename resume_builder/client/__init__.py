"""Client side of the resume builder.

Notes:
    1. `resume_hooks.ResumeHooks` wraps the resume HTTP routes with a query cache
       and user-facing notifications.
    2. `editor` holds the in-memory draft and binds it to the preview renderer.
    3. Every collaborator (HTTP client, cache, notifier) is passed in explicitly.

"""

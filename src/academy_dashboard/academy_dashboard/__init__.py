"""Academy Dashboard package.

Feature modules (auth, attendance, reports) each keep a thin Flask controller
on top of service/repository layers that talk to the academy REST backend.
"""

"""Service layer — invocation contract, results, and failure reporting.

Concrete services subclass ApplicationService and return ServiceResult.
This layer may import from plugins; it must never import from presenters.
"""

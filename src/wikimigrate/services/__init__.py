"""Service layer — link resolution, the migration pipeline, and reporting.

Every public service method returns :class:`~wikimigrate.services.result.ServiceResult`.
"""

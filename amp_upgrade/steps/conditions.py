"""
Predicates on the root resource used to gate optional steps
"""

# Local
from ..session import Session


def internal_databases(session: Session) -> bool:
    """The databases are deployed and managed by the system itself"""
    return not session.root_resource.is_external_database_enabled()


def s3_file_storage(session: Session) -> bool:
    """File storage is backed by an S3 bucket"""
    return session.root_resource.has_s3()

from pydantic import BaseModel


class ReconciliationResponse(BaseModel):
    dangling_mappings_removed: int
    orphaned_access_removed: int
    orphaned_members_removed: int
    quotas_corrected: int


class GraceCheckResponse(BaseModel):
    outcome: str


class GraceResumeResponse(BaseModel):
    scheduled: int

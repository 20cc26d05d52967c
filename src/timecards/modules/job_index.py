from typing import Dict, Iterable

from pydantic_models.data.job_model import JobModel


def build_job_index(jobs: Iterable[JobModel]) -> Dict[str, JobModel]:
    """
    Auftragsnummer -> Auftrag. Bei doppelten Nummern gewinnt der spätere Eintrag.
    """
    index: Dict[str, JobModel] = {}
    for job in jobs:
        index[job.job_code] = job
    return index

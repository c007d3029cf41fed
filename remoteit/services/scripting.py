"""Scripting Service - Files, file versions and jobs"""

from typing import Optional, Sequence

from .. import operations
from ..types import ArgumentInput, FileUpload, JobStatus


class ScriptingService:
    """
    Scripting service for device scripts and jobs

    Methods return the client's result directly: a GraphQLResponse for
    R3Client, an awaitable for AsyncR3Client.
    """

    def __init__(self, client):
        self.client = client

    def list_files(self):
        """List files that were uploaded to remote.it"""
        return self.client.execute(operations.get_files())

    def delete_file(self, file_id: str):
        """
        Delete a file from remote.it, including all versions

        Example:
            ```python
            files = client.scripting.list_files()
            client.scripting.delete_file(files.data["login"]["files"][0]["id"])
            ```
        """
        return self.client.execute(operations.delete_file(file_id))

    def delete_file_version(self, file_version_id: str):
        """Delete one version of a file (not the whole file)"""
        return self.client.execute(operations.delete_file_version(file_version_id))

    def upload_file(self, file_upload: FileUpload):
        """Upload an executable script or an asset used by scripts"""
        return self.client.upload_file(file_upload)

    def start_job(
        self,
        file_id: str,
        device_ids: Sequence[str],
        arguments: Optional[Sequence[ArgumentInput]] = None,
    ):
        """
        Start scripting jobs on one or more devices

        Args:
            file_id: ID of an executable file
            device_ids: Devices to run the script on
            arguments: Optional script arguments
        """
        return self.client.execute(operations.start_job(file_id, device_ids, arguments))

    def cancel_job(self, job_id: str):
        """Cancel a job. Only jobs that have not finished can be cancelled."""
        return self.client.execute(operations.cancel_job(job_id))

    def list_jobs(
        self,
        org_id: Optional[str] = None,
        limit: Optional[int] = None,
        job_ids: Optional[Sequence[str]] = None,
        statuses: Optional[Sequence[JobStatus]] = None,
    ):
        """List jobs, optionally filtered by id and status"""
        return self.client.execute(operations.get_jobs(org_id, limit, job_ids, statuses))

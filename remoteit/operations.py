"""
Pre-written GraphQL operations for the remote.it API

Each builder returns an Operation (document plus variables) ready for
R3Client.execute() or AsyncR3Client.execute(). Unset optional variables
are left out so the server applies its own defaults.
"""

from typing import Any, Dict, List, Optional, Sequence

from .types import JOB_STATUSES, ArgumentInput, JobStatus, Operation


# ============================================================
# Documents
# ============================================================

GET_FILES = """
query GetFiles {
  login {
    files {
      id
      name
      shortDesc
      longDesc
      executable
      created
      updated
      versions {
        items {
          id
          version
          created
        }
      }
    }
  }
}
"""

DELETE_FILE = """
mutation DeleteFile($fileId: String!) {
  deleteFile(fileId: $fileId)
}
"""

DELETE_FILE_VERSION = """
mutation DeleteFileVersion($fileVersionId: String!) {
  deleteFileVersion(fileVersionId: $fileVersionId)
}
"""

START_JOB = """
mutation StartJob($fileId: String!, $deviceIds: [String!]!, $arguments: [ArgumentInput!]) {
  startJob(fileId: $fileId, deviceIds: $deviceIds, arguments: $arguments)
}
"""

CANCEL_JOB = """
mutation CancelJob($jobId: String!) {
  cancelJob(jobId: $jobId)
}
"""

GET_JOBS = """
query GetJobs($orgId: String, $limit: Int, $jobIds: [String!], $statuses: [JobStatusEnum!]) {
  login {
    account(id: $orgId) {
      jobs(size: $limit, ids: $jobIds, statuses: $statuses) {
        items {
          id
          status
          created
          updated
          file {
            id
            name
          }
          jobDevices {
            id
            status
            device {
              id
              name
            }
          }
        }
      }
    }
  }
}
"""

GET_OWNED_ORGANIZATION = """
query GetOwnedOrganization {
  login {
    organization {
      id
      name
      created
      members {
        user {
          id
          email
        }
        role {
          id
          name
        }
      }
    }
  }
}
"""

GET_ORGANIZATION_SELF_MEMBERSHIP = """
query GetOrganizationSelfMembership {
  login {
    membership {
      created
      role {
        id
        name
      }
      organization {
        id
        name
      }
    }
  }
}
"""

GET_APPLICATION_TYPES = """
query GetApplicationTypes {
  applicationTypes {
    id
    name
    description
    port
    protocol
  }
}
"""

GET_DEVICES = """
query GetDevices($orgId: String, $limit: Int, $offset: Int) {
  login {
    account(id: $orgId) {
      devices(size: $limit, from: $offset) {
        total
        items {
          id
          name
          state
          lastReported
          services {
            id
            name
          }
        }
      }
    }
  }
}
"""

GET_DEVICES_CSV = """
query GetDevicesCSV($orgId: String) {
  login {
    account(id: $orgId) {
      devices {
        csv
      }
    }
  }
}
"""


# ============================================================
# Helpers
# ============================================================

def _require(value: str, name: str) -> None:
    if not value:
        raise ValueError(f"{name} is required")


def _string_list(values: Sequence[str], name: str) -> List[str]:
    if isinstance(values, (str, bytes)):
        raise ValueError(f"{name} must be a sequence of strings, not a single {type(values).__name__}")
    return list(values)


def _validate_page(limit: Optional[int], offset: Optional[int] = None) -> None:
    if limit is not None and limit < 0:
        raise ValueError("limit must be non-negative")
    if offset is not None and offset < 0:
        raise ValueError("offset must be non-negative")


def _variables(**values: Any) -> Dict[str, Any]:
    return {name: value for name, value in values.items() if value is not None}


# ============================================================
# Scripting
# ============================================================

def get_files() -> Operation:
    """List files that were uploaded to remote.it"""
    return Operation("GetFiles", GET_FILES)


def delete_file(file_id: str) -> Operation:
    """Delete a file, including all of its versions"""
    _require(file_id, "file_id")
    return Operation("DeleteFile", DELETE_FILE, {"fileId": file_id})


def delete_file_version(file_version_id: str) -> Operation:
    """Delete one version of a file (not the whole file)"""
    _require(file_version_id, "file_version_id")
    return Operation("DeleteFileVersion", DELETE_FILE_VERSION, {"fileVersionId": file_version_id})


def start_job(
    file_id: str,
    device_ids: Sequence[str],
    arguments: Optional[Sequence[ArgumentInput]] = None,
) -> Operation:
    """
    Start a scripting job on one or more devices

    Args:
        file_id: ID of an executable file, see get_files()
        device_ids: Devices to run the script on, see get_devices()
        arguments: Optional script arguments
    """
    _require(file_id, "file_id")
    device_id_list = _string_list(device_ids, "device_ids")
    if not device_id_list:
        raise ValueError("device_ids must contain at least one device")
    for device_id in device_id_list:
        _require(device_id, "device_ids entry")

    return Operation(
        "StartJob",
        START_JOB,
        _variables(
            fileId=file_id,
            deviceIds=device_id_list,
            arguments=[a.as_variables() for a in arguments] if arguments is not None else None,
        ),
    )


def cancel_job(job_id: str) -> Operation:
    """Cancel a job"""
    _require(job_id, "job_id")
    return Operation("CancelJob", CANCEL_JOB, {"jobId": job_id})


def get_jobs(
    org_id: Optional[str] = None,
    limit: Optional[int] = None,
    job_ids: Optional[Sequence[str]] = None,
    statuses: Optional[Sequence[JobStatus]] = None,
) -> Operation:
    """
    List jobs

    Setting a limit is recommended; unbounded job queries can be slow.
    """
    _validate_page(limit)
    job_id_list = _string_list(job_ids, "job_ids") if job_ids is not None else None
    status_list = _string_list(statuses, "statuses") if statuses is not None else None
    if status_list is not None:
        invalid = [s for s in status_list if s not in JOB_STATUSES]
        if invalid:
            raise ValueError(f"invalid job statuses: {invalid}. Expected one of {list(JOB_STATUSES)}")

    return Operation(
        "GetJobs",
        GET_JOBS,
        _variables(
            orgId=org_id,
            limit=limit,
            jobIds=job_id_list,
            statuses=status_list,
        ),
    )


# ============================================================
# Organizations
# ============================================================

def get_owned_organization() -> Operation:
    """The organization owned by the current user, if any"""
    return Operation("GetOwnedOrganization", GET_OWNED_ORGANIZATION)


def get_organization_self_membership() -> Operation:
    """Organizations the current user is a member of"""
    return Operation("GetOrganizationSelfMembership", GET_ORGANIZATION_SELF_MEMBERSHIP)


# ============================================================
# Devices and services
# ============================================================

def get_application_types() -> Operation:
    return Operation("GetApplicationTypes", GET_APPLICATION_TYPES)


def get_devices(
    org_id: Optional[str] = None,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
) -> Operation:
    """List devices. Use offset with limit to paginate."""
    _validate_page(limit, offset)
    return Operation("GetDevices", GET_DEVICES, _variables(orgId=org_id, limit=limit, offset=offset))


def get_devices_csv(org_id: Optional[str] = None) -> Operation:
    """Download link for a CSV export of devices"""
    return Operation("GetDevicesCSV", GET_DEVICES_CSV, _variables(orgId=org_id))


# ============================================================
# Custom
# ============================================================

def custom_operation(
    query: str,
    variables: Optional[Dict[str, Any]] = None,
    operation_name: Optional[str] = None,
) -> Operation:
    """Wrap an arbitrary GraphQL document. The document is not validated."""
    if not query or not query.strip():
        raise ValueError("query is required")
    return Operation(operation_name, query, dict(variables or {}))


__all__: List[str] = [
    "get_files",
    "delete_file",
    "delete_file_version",
    "start_job",
    "cancel_job",
    "get_jobs",
    "get_owned_organization",
    "get_organization_self_membership",
    "get_application_types",
    "get_devices",
    "get_devices_csv",
    "custom_operation",
]

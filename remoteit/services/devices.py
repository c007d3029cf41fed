"""Device Service - Devices and application types"""

from typing import Optional

from .. import operations


class DeviceService:
    """Device service"""

    def __init__(self, client):
        self.client = client

    def list(
        self,
        org_id: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ):
        """
        List devices

        Example:
            ```python
            page = client.devices.list(limit=50, offset=100)
            for device in page.data["login"]["account"]["devices"]["items"]:
                print(device["id"], device["name"])
            ```
        """
        return self.client.execute(operations.get_devices(org_id, limit, offset))

    def list_application_types(self):
        return self.client.execute(operations.get_application_types())

    def export_csv(self, org_id: Optional[str] = None):
        """Download link for a CSV export of all devices"""
        return self.client.execute(operations.get_devices_csv(org_id))

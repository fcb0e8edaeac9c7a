"""sigtrail API: verification over HTTP."""

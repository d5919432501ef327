"""Package marker for the resume tailoring API service."""

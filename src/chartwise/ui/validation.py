"""Pre-flight validation for the Streamlit UI.

No services or store; uses the API client for backend checks.
"""
from typing import List


def validate_data_dir() -> List[str]:
    """Validate that the data directory exists (or can be created) and is writable."""
    errors = []
    # Import here to avoid circular issues at module level
    from chartwise.config import settings
    data_dir = settings.data_dir

    try:
        data_dir.mkdir(parents=True, exist_ok=True)
        test_file = data_dir / ".write_test"
        test_file.touch()
        test_file.unlink()
    except OSError as e:
        errors.append(f"Cannot write to data directory {data_dir}: {e}")

    return errors


def validate_backend_connection() -> List[str]:
    """Validate that the FastAPI backend is reachable."""
    errors = []
    try:
        from chartwise.ui.api_client import ChartwiseClient
        client = ChartwiseClient()
        client.health()
    except Exception as e:
        errors.append(f"Backend connection failed: {e}")
    return errors


def validate_upload(file_name: str, size_bytes: int) -> List[str]:
    """Blocking client-side checks before sending a file; the server repeats them."""
    errors = []
    if not file_name.lower().endswith(".csv"):
        errors.append(f"{file_name} is not a CSV file. Please upload a .csv file.")
    if size_bytes == 0:
        errors.append("CSV file is empty. Please upload a file with data.")
    return errors


def run_all_checks() -> List[str]:
    """Run all validation checks."""
    errors = []
    errors.extend(validate_data_dir())
    errors.extend(validate_backend_connection())
    return errors

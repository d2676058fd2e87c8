#!/usr/bin/env python3
"""Generate JWT tokens for each role, for manual API testing."""
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from competency_hub.core.auth import create_access_token

for role in ("employee", "assessor", "hr"):
    token = create_access_token(f"{role}-test", roles=[role], email=f"{role}@example.com")
    print(f"{role.title()} Token:\n{token}\n")

"""Low level rfc5545 parsing into components and properties."""

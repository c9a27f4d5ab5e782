#!/usr/bin/env python3
"""
signin-harvest - Browser Sign-in Cookie Harvester
Convenient entry point script in project root.
"""

import sys

from signin_harvest.cli import main

if __name__ == '__main__':
    try:
        main()
    except KeyboardInterrupt:
        print("\n⚠️  Application interrupted by user")
        sys.exit(1)
    except Exception as e:
        print(f"❌ Unexpected error: {e}")
        sys.exit(1)

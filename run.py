#!/usr/bin/env python3
"""
Startup script for the Field Sales Intake app
"""
from src.intake_app.app import main

if __name__ == '__main__':
    main().main_loop()

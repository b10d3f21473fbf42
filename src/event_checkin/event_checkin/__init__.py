"""Event Check-in package.

Organised by feature modules (events, categories, participants, roster,
checkin, stats) with a thin Flask controller layer on top of service and
repository layers. Two storage backends (embedded SQLite, hosted MySQL)
implement the same repository protocols.
"""

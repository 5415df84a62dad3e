"""SOS relief API: validated SOS reports, role-checked login and login auditing."""

__version__ = "0.1.0"

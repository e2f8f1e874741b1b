"""PrintBridge - Local print bridge for the gang-sheet print workflow.

PrintBridge runs on the machine attached to the printers and exposes a
small HTTP API on the loopback interface. The remote web application uses
it to list installed printers, pick a default one and send documents to
print by URL. Documents are downloaded to a temporary directory, handed to
the OS print spooler and removed afterwards.

Usage:
    printbridge serve
    printbridge gui
    printbridge printers
    printbridge status
"""

__version__ = "0.1.0"

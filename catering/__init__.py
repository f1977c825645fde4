"""
                Catering Booking Admin

Admin back office for a catering business: booking views, kitchen
preparation rollups, day summaries, status/payment changes against the
booking API, receipt and kitchen-docket printing, and spreadsheet exports.

Author: Khalil_Bannouri
Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
__author__ = "Khalil_Bannouri"

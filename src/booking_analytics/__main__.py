import sys

from booking_analytics.main import main

sys.exit(main())

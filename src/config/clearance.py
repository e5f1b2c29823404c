# Clearance levels and their descriptions
CLEARANCE_LEVELS = {
    "OS": "Level 5 System Access | Overseer System",
    "DA": "Level 4 System Access | Director Access",
    "CA": "Level 3 System Access | Command Access",
    "SA": "Level 2 System Access | Security Access",
    "RA": "Level 1 System Access | Restricted Access",
    "LA": "Level 0 System Access | Limited Access",
    "XA": "Level ∅ System Access | Experimental Access",
    "AA": "Level Authorized Access | Automated Access"
}

# Clearance hierarchy, most senior first
CLEARANCE_ORDER = ["OS", "DA", "CA", "SA", "RA", "LA", "XA", "AA"]

# Shown for executors holding no clearance role
UNRANKED = "UN"

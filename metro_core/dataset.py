"""Embedded project list (DMRC, BMRCL and MMRCL lines).

Kept in the same camelCase shape as the JSON document so both go through
one normalization path.
"""

from __future__ import annotations

from typing import Any, Dict, List


def _line(id, name, city, line_number, line_color, status, year, length_km, stations, from_station, to_station, investment, description):
    return {
        "id": id,
        "name": name,
        "city": city,
        "country": "India",
        "region": "India",
        "lineNumber": line_number,
        "lineColor": line_color,
        "status": status,
        "operationalYear": year,
        "lengthKm": length_km,
        "noOfStations": stations,
        "fromStation": from_station,
        "toStation": to_station,
        "investment": investment,
        "description": description,
    }


METRO_PROJECTS: List[Dict[str, Any]] = [
    # Delhi Metro
    _line(1, "Red Line (Line 1)", "Delhi", 1, "#E41E23", "operational", 2002, 26.46, 21, "Rithala", "Kundli", "$3.2B",
          "Delhi Metro Red Line connecting North Delhi"),
    _line(2, "Yellow Line (Line 2)", "Delhi", 2, "#FDB913", "operational", 2004, 49.06, 38, "Samaypur Badli", "HUDA City Centre", "$4.8B",
          "North to South Delhi connection via central Delhi"),
    _line(3, "Blue Line (Line 3)", "Delhi", 3, "#002DA6", "operational", 2004, 37.42, 30, "Noida City Centre", "Vaishali", "$5.1B",
          "Delhi to Noida connecting major commercial areas"),
    _line(4, "Blue Line Branch (Line 4)", "Delhi", 4, "#002DA6", "operational", 2010, 17.36, 12, "Rajiv Chowk", "Inderlok", "$1.8B",
          "Branch line connecting Central Delhi"),
    _line(5, "Green Line (Line 5)", "Delhi", 5, "#00B050", "operational", 2006, 22.23, 18, "Inderlok", "Indraprastha", "$2.5B",
          "East to West Delhi metro connection"),
    _line(6, "Violet Line (Line 6)", "Delhi", 6, "#6D28BD", "operational", 2010, 38.24, 21, "Kashmere Gate", "Raja Bagh", "$4.2B",
          "North-South corridor via central Delhi"),
    _line(7, "Pink Line (Line 7)", "Delhi", 7, "#E8198B", "operational", 2018, 33.09, 20, "Majlis Park", "Lajpat Nagar", "$3.8B",
          "New Pink Line connecting North and South Delhi"),
    _line(8, "Magenta Line (Line 8)", "Delhi", 8, "#C41E3A", "operational", 2017, 27.24, 18, "Janakpuri West", "Inder Lok", "$3.5B",
          "Magenta Line metro expansion"),
    _line(9, "Grey Line (Line 9)", "Delhi", 9, "#A9A9A9", "operational", 2013, 12.73, 8, "Dwarka Sector 21", "Dwarka Sector 8", "$1.4B",
          "Dwarka area metro coverage"),
    _line(10, "Orange Line (Line 10)", "Delhi", 10, "#FF8C00", "operational", 2010, 35.84, 22, "New Delhi", "Dwarka Sector 21", "$3.9B",
          "Orange Line connecting city center to Dwarka"),
    _line(11, "Rapid Metro Line (Line 11)", "Delhi", 11, "#A0A0A0", "operational", 2019, 12.00, 11, "Delhi Aerocity", "Rapid Metro South", "$1.2B",
          "Rapid Metro connectivity"),
    # Bangalore Metro (Namma Metro)
    _line(12, "Purple Line", "Bangalore", 1, "#6D28BD", "operational", 2011, 42.17, 37, "Challaghatta", "Whitefield (Kadugodi)", "$2.8B",
          "Bangalore Metro Purple Line Phase 1"),
    _line(13, "Green Line", "Bangalore", 2, "#00B050", "operational", 2015, 33.03, 32, "Madavara", "Silk Institute", "$2.5B",
          "Bangalore Metro Green Line Phase 2"),
    _line(14, "Yellow Line", "Bangalore", 3, "#FDB913", "operational", 2020, 19.143, 16, "RV Road", "Bommasandra", "$1.9B",
          "Bangalore Metro Yellow Line Phase 2"),
    # Mumbai Metro
    _line(15, "Blue Line (Line 1)", "Mumbai", 1, "#002DA6", "operational", 2006, 11.4, 6, "Versova", "Ghatkopar", "$2.1B",
          "Mumbai Metro Blue Line connecting West to East Mumbai"),
    _line(16, "Red Line (Line 2)", "Mumbai", 2, "#E41E23", "operational", 2014, 32.4, 16, "Dahisar", "Andheri", "$2.9B",
          "Mumbai Metro Red Line Phase 2A"),
    _line(17, "Aqua Line (Line 3)", "Mumbai", 3, "#00B4D8", "under_construction", 2025, 33.37, 27, "Colaba", "Seepz", "$4.5B",
          "Mumbai Metro Aqua Line completely underground"),
]

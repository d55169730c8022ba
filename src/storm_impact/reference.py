# src/storm_impact/reference.py
"""
Module: reference.py
Responsibilities:
- State abbreviation -> region name lookup (50 states + District of Columbia)
- Canonical NWS event category list (display only)
- Bundle both into an immutable ReferenceData passed into the pipeline
"""
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Tuple

STATE_REGIONS: Mapping[str, str] = MappingProxyType({
    'AL': 'Alabama',
    'AK': 'Alaska',
    'AZ': 'Arizona',
    'AR': 'Arkansas',
    'CA': 'California',
    'CO': 'Colorado',
    'CT': 'Connecticut',
    'DE': 'Delaware',
    'DC': 'District of Columbia',
    'FL': 'Florida',
    'GA': 'Georgia',
    'HI': 'Hawaii',
    'ID': 'Idaho',
    'IL': 'Illinois',
    'IN': 'Indiana',
    'IA': 'Iowa',
    'KS': 'Kansas',
    'KY': 'Kentucky',
    'LA': 'Louisiana',
    'ME': 'Maine',
    'MD': 'Maryland',
    'MA': 'Massachusetts',
    'MI': 'Michigan',
    'MN': 'Minnesota',
    'MS': 'Mississippi',
    'MO': 'Missouri',
    'MT': 'Montana',
    'NE': 'Nebraska',
    'NV': 'Nevada',
    'NH': 'New Hampshire',
    'NJ': 'New Jersey',
    'NM': 'New Mexico',
    'NY': 'New York',
    'NC': 'North Carolina',
    'ND': 'North Dakota',
    'OH': 'Ohio',
    'OK': 'Oklahoma',
    'OR': 'Oregon',
    'PA': 'Pennsylvania',
    'RI': 'Rhode Island',
    'SC': 'South Carolina',
    'SD': 'South Dakota',
    'TN': 'Tennessee',
    'TX': 'Texas',
    'UT': 'Utah',
    'VT': 'Vermont',
    'VA': 'Virginia',
    'WA': 'Washington',
    'WV': 'West Virginia',
    'WI': 'Wisconsin',
    'WY': 'Wyoming',
})

# NWS Directive 10-1605, Table 1
EVENT_CATEGORIES: Tuple[str, ...] = (
    'Astronomical Low Tide',
    'Avalanche',
    'Blizzard',
    'Coastal Flood',
    'Cold/Wind Chill',
    'Debris Flow',
    'Dense Fog',
    'Dense Smoke',
    'Drought',
    'Dust Devil',
    'Dust Storm',
    'Excessive Heat',
    'Extreme Cold/Wind Chill',
    'Flash Flood',
    'Flood',
    'Frost/Freeze',
    'Funnel Cloud',
    'Freezing Fog',
    'Hail',
    'Heat',
    'Heavy Rain',
    'Heavy Snow',
    'High Surf',
    'High Wind',
    'Hurricane (Typhoon)',
    'Ice Storm',
    'Lake-Effect Snow',
    'Lakeshore Flood',
    'Lightning',
    'Marine Hail',
    'Marine High Wind',
    'Marine Strong Wind',
    'Marine Thunderstorm Wind',
    'Rip Current',
    'Seiche',
    'Sleet',
    'Storm Surge/Tide',
    'Strong Wind',
    'Thunderstorm Wind',
    'Tornado',
    'Tropical Depression',
    'Tropical Storm',
    'Tsunami',
    'Volcanic Ash',
    'Waterspout',
    'Wildfire',
    'Winter Storm',
    'Winter Weather',
)


@dataclass(frozen=True)
class ReferenceData:
    """Static lookup tables shared by the pipeline stages."""
    state_regions: Mapping[str, str] = field(default_factory=lambda: STATE_REGIONS)
    categories: Tuple[str, ...] = EVENT_CATEGORIES


def default_reference() -> ReferenceData:
    """Return the lookup tables used for the published report."""
    return ReferenceData(state_regions=STATE_REGIONS, categories=EVENT_CATEGORIES)


def region_codes(state_regions: Mapping[str, str] = STATE_REGIONS) -> Dict[str, str]:
    """
    Invert a state lookup into region name -> state code.

    Parameters
    ----------
    state_regions : Mapping[str, str]
        State abbreviation -> region name

    Returns
    -------
    Dict[str, str]
        Region name -> state abbreviation

    Raises
    ------
    ValueError
        If two codes map to the same region
    """
    inverse: Dict[str, str] = {}
    for code, region in state_regions.items():
        if region in inverse:
            raise ValueError(f"Region '{region}' is mapped by both {inverse[region]} and {code}")
        inverse[region] = code
    return inverse

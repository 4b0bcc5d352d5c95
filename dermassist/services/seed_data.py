"""
Demo records loaded into the in-memory stores at startup
"""

SEED_PATIENTS = [
    {
        "id": 1,
        "name": "Rajesh Kumar",
        "age": 45,
        "gender": "Male",
        "village": "Rampur",
        "phone": "+91-9876543210",
        "cases": [],
        "createdAt": "2024-01-10T10:00:00+00:00",
        "updatedAt": "2024-01-15T14:30:00+00:00",
    },
    {
        "id": 2,
        "name": "Priya Sharma",
        "age": 32,
        "gender": "Female",
        "village": "Rampur",
        "phone": "+91-9876543211",
        "cases": [],
        "createdAt": "2024-01-12T09:15:00+00:00",
        "updatedAt": "2024-01-14T16:45:00+00:00",
    },
]

SEED_REPORTS = [
    {
        "id": 1,
        "patientName": "Rajesh Kumar",
        "condition": "Fungal Infection",
        "date": "2024-01-15",
        "status": "Completed",
        "type": "Diagnostic Report",
        "confidence": 87,
        "severity": "Moderate",
    },
    {
        "id": 2,
        "patientName": "Priya Sharma",
        "condition": "Contact Dermatitis",
        "date": "2024-01-14",
        "status": "Under Review",
        "type": "Diagnostic Report",
        "confidence": 78,
        "severity": "Mild",
    },
]

SEED_VILLAGES = [
    {
        "name": "Rampur",
        "population": 1200,
        "activeCases": 5,
        "recoveredCases": 12,
        "commonCondition": "Fungal Infections",
        "riskLevel": "Medium",
        "lastUpdated": "2024-01-15",
    },
    {
        "name": "Mohalla",
        "population": 800,
        "activeCases": 3,
        "recoveredCases": 8,
        "commonCondition": "Contact Dermatitis",
        "riskLevel": "Low",
        "lastUpdated": "2024-01-14",
    },
    {
        "name": "Khalilabad",
        "population": 950,
        "activeCases": 7,
        "recoveredCases": 5,
        "commonCondition": "Scabies",
        "riskLevel": "High",
        "lastUpdated": "2024-01-15",
    },
]

SEED_OUTBREAKS = [
    {
        "id": 1,
        "condition": "Scabies outbreak",
        "village": "Khalilabad",
        "cases": 7,
        "severity": "High",
        "recommendation": "Immediate mass screening recommended",
        "reportedDate": "2024-01-15",
        "status": "Active",
    },
    {
        "id": 2,
        "condition": "Fungal infections cluster",
        "village": "Rampur",
        "cases": 4,
        "severity": "Medium",
        "recommendation": "Monitor hygiene practices",
        "reportedDate": "2024-01-14",
        "status": "Monitoring",
    },
]

SEED_TRENDS = [
    {
        "condition": "Fungal Infections",
        "trend": "increasing",
        "change": "+15%",
        "period": "This week",
        "currentCases": 8,
        "previousCases": 7,
    },
    {
        "condition": "Contact Dermatitis",
        "trend": "stable",
        "change": "0%",
        "period": "This week",
        "currentCases": 3,
        "previousCases": 3,
    },
    {
        "condition": "Bacterial Infections",
        "trend": "decreasing",
        "change": "-20%",
        "period": "This week",
        "currentCases": 2,
        "previousCases": 3,
    },
]

VILLAGE_RISK_FACTORS = [
    "Population density",
    "Water quality",
    "Sanitation facilities",
    "Healthcare access",
]

COMMUNITY_RECOMMENDATIONS = {
    "immediate": [
        "Conduct mass screening in Khalilabad for scabies",
        "Distribute hygiene education materials",
        "Follow up with high-risk patients in Rampur",
    ],
    "weekly": [
        "Monitor fungal infection trends in Rampur",
        "Report weekly statistics to PHC",
        "Update community health records",
        "Conduct village health meetings",
    ],
    "monthly": [
        "Review outbreak response protocols",
        "Analyze disease pattern trends",
        "Update risk assessments for all villages",
        "Coordinate with district health office",
    ],
}

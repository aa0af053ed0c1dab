# tanques de demonstração carregados ao iniciar o painel/simulador
# (substitui o cadastro enquanto não há sensores reais)

SEED_TANKS = [
    {"tank_id": "tank-001", "name": "Main Residential Tank", "owner": "Smith Family",
     "capacity_liters": 5000, "current_liters": 4200, "last_refill": "2024-08-30T08:30:00Z",
     "avg_consumption_lph": 12.5, "is_community": False, "location": "123 Oak Street",
     "status": "healthy"},
    {"tank_id": "tank-002", "name": "Community Tank Alpha", "owner": None,
     "capacity_liters": 15000, "current_liters": 8500, "last_refill": "2024-08-28T06:00:00Z",
     "avg_consumption_lph": 45.8, "is_community": True, "location": "Riverside Community Center",
     "status": "low"},
    {"tank_id": "tank-003", "name": "Johnson Residence", "owner": "Johnson Family",
     "capacity_liters": 3500, "current_liters": 2800, "last_refill": "2024-09-01T14:20:00Z",
     "avg_consumption_lph": 8.2, "is_community": False, "location": "456 Pine Avenue",
     "status": "healthy"},
    {"tank_id": "tank-004", "name": "Community Tank Beta", "owner": None,
     "capacity_liters": 20000, "current_liters": 3200, "last_refill": "2024-08-25T09:15:00Z",
     "avg_consumption_lph": 52.3, "is_community": True, "location": "Downtown District",
     "status": "critical"},
    {"tank_id": "tank-005", "name": "Garcia Family Tank", "owner": "Garcia Family",
     "capacity_liters": 4000, "current_liters": 1200, "last_refill": "2024-08-29T11:45:00Z",
     "avg_consumption_lph": 15.7, "is_community": False, "location": "789 Maple Drive",
     "status": "low"},
    {"tank_id": "tank-006", "name": "School District Tank", "owner": None,
     "capacity_liters": 12000, "current_liters": 9600, "last_refill": "2024-09-01T07:30:00Z",
     "avg_consumption_lph": 28.4, "is_community": True, "location": "Central Elementary School",
     "status": "healthy"},
    {"tank_id": "tank-007", "name": "Brown Household", "owner": "Brown Family",
     "capacity_liters": 2800, "current_liters": 2450, "last_refill": "2024-08-31T16:00:00Z",
     "avg_consumption_lph": 6.8, "is_community": False, "location": "321 Cedar Lane",
     "status": "healthy"},
    {"tank_id": "tank-008", "name": "Industrial Complex Tank", "owner": None,
     "capacity_liters": 25000, "current_liters": 18750, "last_refill": "2024-08-27T05:45:00Z",
     "avg_consumption_lph": 67.2, "is_community": True, "location": "North Industrial Park",
     "status": "healthy"},
]

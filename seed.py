from booking_portal import create_app, db
from booking_portal.models import User, Resource
from booking_portal.storage import close_database

app = create_app()

with app.app_context():
    db.create_all()

    users_data = [
        {"name": "Portal Admin", "email": "admin@campus.edu", "role": "Portal Admin"},
        {"name": "Dr. Meera Rao", "email": "meera.rao@campus.edu", "role": "Faculty"},
        {"name": "Arjun Placement Cell", "email": "placements@campus.edu", "role": "Placement Executive"},
        {"name": "Student Coordinator", "email": "coordinator@campus.edu", "role": "Student Coordinator"},
    ]

    for u_data in users_data:
        if not User.query.filter_by(email=u_data['email']).first():
            db.session.add(User(**u_data))
            print(f"User {u_data['email']} ({u_data['role']}) created.")

    # Create Resources
    resources_data = [
        {"name": "Seminar Hall A", "type": "Seminar Hall", "location": "Main Block", "capacity": 120},
        {"name": "Computer Lab 2", "type": "Lab", "location": "IT Block, 2nd floor", "capacity": 60},
        {"name": "Conference Room", "type": "Meeting Room", "location": "Admin Block", "capacity": 20},
        {"name": "Portable Projector", "type": "Equipment", "location": "AV Store", "capacity": None},
    ]

    for r_data in resources_data:
        if not Resource.query.filter_by(name=r_data['name']).first():
            resource = Resource(**r_data)
            db.session.add(resource)
            print(f"Resource {resource.name} created.")

    db.session.commit()
    print("Database seeded successfully.")

close_database(app)

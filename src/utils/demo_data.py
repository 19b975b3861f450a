"""Demo data seeding.

When the user collection is empty, the demo admin and five demo alumni per
department are created so the console has something to show.
"""

import logging
from typing import List, Tuple

from config import DEFAULT_ADMIN_EMAIL, DEFAULT_ADMIN_PASSWORD, DEMO_ALUMNI_PASSWORD
from schemas.user import User
from utils.password import hash_password
from utils.user_manager import UserManager

logger = logging.getLogger(__name__)

# (id, name, email, department, graduation year, company, position, skills, linkedin, mentorship)
DEMO_ALUMNI: List[Tuple] = [
    (2, "John Smith", "john.smith@alumni.edu", "CSE", 2020, "TechWorks", "Software Engineer", "JavaScript, React, Node.js", "https://linkedin.com/in/johnsmith", True),
    (12, "Alice Brown", "alice.brown@alumni.edu", "CSE", 2019, "DataSys", "Data Scientist", "Python, ML, SQL", "https://linkedin.com/in/alicebrown", False),
    (13, "Bob Davis", "bob.davis@alumni.edu", "CSE", 2021, "WebDev Inc", "Frontend Developer", "HTML, CSS, Vue.js", "https://linkedin.com/in/bobdavis", True),
    (14, "Charlie Evans", "charlie.evans@alumni.edu", "CSE", 2018, "SecureTech", "Security Analyst", "Cybersecurity, Networking", "https://linkedin.com/in/charlieevans", False),
    (15, "Diana Foster", "diana.foster@alumni.edu", "CSE", 2022, "AI Labs", "AI Engineer", "TensorFlow, Python", "https://linkedin.com/in/dianafoster", True),
    (3, "Priya Kumar", "priya.kumar@alumni.edu", "ECE", 2019, "Circuits Ltd", "Embedded Engineer", "C, Embedded Systems, FPGA", "https://linkedin.com/in/priyak", False),
    (16, "Eve Garcia", "eve.garcia@alumni.edu", "ECE", 2017, "SignalTech", "Signal Processing Engineer", "MATLAB, DSP", "https://linkedin.com/in/evegarcia", True),
    (17, "Frank Harris", "frank.harris@alumni.edu", "ECE", 2020, "RF Solutions", "RF Engineer", "RF Design, Antennas", "https://linkedin.com/in/frankharris", False),
    (18, "Grace Ingram", "grace.ingram@alumni.edu", "ECE", 2016, "IoT Devices", "IoT Engineer", "IoT, Sensors, Arduino", "https://linkedin.com/in/graceingram", True),
    (19, "Henry Jackson", "henry.jackson@alumni.edu", "ECE", 2021, "VLSI Corp", "VLSI Designer", "VLSI, Verilog", "https://linkedin.com/in/henryjackson", False),
    (4, "Rahul Verma", "rahul.verma@alumni.edu", "EEE", 2018, "PowerGrid", "Electrical Engineer", "Power Systems, MATLAB", "https://linkedin.com/in/rahulv", True),
    (20, "Ivy Kelly", "ivy.kelly@alumni.edu", "EEE", 2017, "ControlSys", "Control Engineer", "Control Systems, PLC", "https://linkedin.com/in/ivykelly", False),
    (21, "Jack Lee", "jack.lee@alumni.edu", "EEE", 2019, "Renewable Energy", "Solar Engineer", "Solar PV, Inverters", "https://linkedin.com/in/jacklee", True),
    (22, "Karen Miller", "karen.miller@alumni.edu", "EEE", 2020, "Automation Ltd", "Automation Engineer", "SCADA, Robotics", "https://linkedin.com/in/karenmiller", False),
    (23, "Liam Nelson", "liam.nelson@alumni.edu", "EEE", 2022, "High Voltage", "HV Engineer", "High Voltage, Transformers", "https://linkedin.com/in/liamnelson", True),
    (5, "Asha Patel", "asha.patel@alumni.edu", "Mechanical", 2017, "MechWorks", "Design Engineer", "AutoCAD, SolidWorks, Manufacturing", "https://linkedin.com/in/ashap", False),
    (24, "Nina Olson", "nina.olson@alumni.edu", "Mechanical", 2018, "ThermoEng", "Thermal Engineer", "Heat Transfer, CFD", "https://linkedin.com/in/ninaolson", True),
    (25, "Oscar Parker", "oscar.parker@alumni.edu", "Mechanical", 2019, "FluidDyn", "Fluid Engineer", "Fluid Mechanics, ANSYS", "https://linkedin.com/in/oscarparker", False),
    (26, "Paula Quinn", "paula.quinn@alumni.edu", "Mechanical", 2020, "Robotics Inc", "Robotics Engineer", "Robotics, Mechatronics", "https://linkedin.com/in/paulaquinn", True),
    (27, "Quinn Roberts", "quinn.roberts@alumni.edu", "Mechanical", 2021, "AeroMech", "Aerospace Mech Engineer", "Aerospace, Composites", "https://linkedin.com/in/quinnroberts", False),
    (6, "Vikram Singh", "vikram.singh@alumni.edu", "Civil", 2016, "InfraBuild", "Site Engineer", "Structural Design, AutoCAD", "https://linkedin.com/in/vikrams", True),
    (28, "Rachel Taylor", "rachel.taylor@alumni.edu", "Civil", 2017, "GeoTech", "Geotechnical Engineer", "Soil Mechanics, Foundations", "https://linkedin.com/in/racheltaylor", False),
    (29, "Sam Underwood", "sam.underwood@alumni.edu", "Civil", 2018, "EnvEng", "Environmental Engineer", "Environmental Impact, Water Treatment", "https://linkedin.com/in/samunderwood", True),
    (30, "Tina Vargas", "tina.vargas@alumni.edu", "Civil", 2019, "TransPlan", "Transportation Engineer", "Traffic Engineering, GIS", "https://linkedin.com/in/tinavargas", False),
    (31, "Uma Wilson", "uma.wilson@alumni.edu", "Civil", 2020, "StructEng", "Structural Engineer", "Structural Analysis, STAAD", "https://linkedin.com/in/umawilson", True),
    (7, "Neha Gupta", "neha.gupta@alumni.edu", "MBA", 2018, "MarketWise", "Strategy Analyst", "Strategy, Excel, SQL", "https://linkedin.com/in/nehag", False),
    (32, "Victor Xu", "victor.xu@alumni.edu", "MBA", 2019, "FinanceCorp", "Financial Analyst", "Finance, Modeling, Valuation", "https://linkedin.com/in/victorxu", True),
    (33, "Wendy Young", "wendy.young@alumni.edu", "MBA", 2020, "HR Solutions", "HR Manager", "HR, Recruitment, Talent Management", "https://linkedin.com/in/wendyyoung", False),
    (34, "Xavier Zhang", "xavier.zhang@alumni.edu", "MBA", 2021, "OpsMgmt", "Operations Manager", "Operations, Lean, Six Sigma", "https://linkedin.com/in/xavierzhang", True),
    (35, "Yara Zimmerman", "yara.zimmerman@alumni.edu", "MBA", 2022, "MarketingPro", "Marketing Manager", "Digital Marketing, SEO, Analytics", "https://linkedin.com/in/yarazimmerman", False),
    (8, "Arjun Rao", "arjun.rao@alumni.edu", "Diploma", 2015, "FactoryLine", "Maintenance Supervisor", "PLC, Maintenance", "https://linkedin.com/in/arjunr", False),
    (36, "Zoe Adams", "zoe.adams@alumni.edu", "Diploma", 2016, "TechSupport", "Technical Support", "Troubleshooting, Hardware", "https://linkedin.com/in/zoeadams", True),
    (37, "Aaron Baker", "aaron.baker@alumni.edu", "Diploma", 2017, "AssemblyLine", "Production Supervisor", "Production, Quality Control", "https://linkedin.com/in/aaronbaker", False),
    (38, "Bella Carter", "bella.carter@alumni.edu", "Diploma", 2018, "FieldService", "Field Technician", "Field Service, Repairs", "https://linkedin.com/in/bellacarter", True),
    (39, "Caleb Diaz", "caleb.diaz@alumni.edu", "Diploma", 2019, "LabTech", "Lab Technician", "Lab Equipment, Testing", "https://linkedin.com/in/calebdiaz", False),
]


def demo_admin() -> User:
    return User(
        id=1,
        name="Admin User",
        email=DEFAULT_ADMIN_EMAIL,
        password_hash=hash_password(DEFAULT_ADMIN_PASSWORD),
        role="admin",
        department="Computer Science",
        graduation_year=2015,
        company="University Admin",
        position="System Administrator",
        skills="Management, Analytics, Administration",
        linkedin="https://linkedin.com/in/admin",
        mentorship=True,
    )


def demo_alumni() -> List[User]:
    password_hash = hash_password(DEMO_ALUMNI_PASSWORD)
    return [
        User(
            id=user_id,
            name=name,
            email=email,
            password_hash=password_hash,
            role="alumni",
            department=department,
            graduation_year=year,
            company=company,
            position=position,
            skills=skills,
            linkedin=linkedin,
            mentorship=mentorship,
        )
        for user_id, name, email, department, year, company, position, skills, linkedin, mentorship in DEMO_ALUMNI
    ]


def seed_demo_data(users: UserManager) -> int:
    """Seed the demo accounts if the user collection is empty.

    Returns:
        Number of records created (0 when data already existed).
    """
    if users.load_records():
        return 0
    records = [demo_admin().to_record()] + [u.to_record() for u in demo_alumni()]
    users.save_records(records)
    logger.info("Demo data initialized (%d users)", len(records))
    return len(records)

"""
Scénarios de bout en bout sur une base SQLite en mémoire :
inscription, classes, tâches, soumissions, administration, projets, groupes, messagerie.
"""

from sqlalchemy import delete

from app.models.school_class import ClassMember


# --- Helpers ---

def register(client, first_name, role, email=None):
    email = email or f"{first_name.lower()}@ecole.be"
    response = client.post("/api/auth/register", json={
        "first_name": first_name,
        "last_name": "Test",
        "email": email,
        "password": "secret123",
        "role": role,
    })
    assert response.status_code == 201, response.json()
    body = response.json()
    return {"x-auth-token": body["token"]}, body["user"]["id"]


def login(client, email):
    response = client.post("/api/auth/login", json={"email": email, "password": "secret123"})
    assert response.status_code == 200
    return {"x-auth-token": response.json()["token"]}


def create_class(client, teacher):
    response = client.post("/api/classes", json={"name": "Mathématiques 5A"}, headers=teacher)
    assert response.status_code == 201
    return response.json()["class"]


def create_task(client, teacher, class_id):
    response = client.post("/api/tasks", json={
        "class_id": class_id, "title": "Devoir 1", "deadline": "2030-06-01T12:00:00",
    }, headers=teacher)
    assert response.status_code == 201
    return response.json()["task"]["id"]


# ============================================================
# Identité
# ============================================================

def test_inscription_connexion_et_identite(sqlite_app):
    client, _ = sqlite_app
    token, user_id = register(client, "Anne", "Professeur")

    me = client.get("/api/auth/me", headers=token).json()
    assert me == {"id": user_id, "email": "anne@ecole.be", "role": "Professeur"}

    assert login(client, "anne@ecole.be")
    response = client.post("/api/auth/login", json={"email": "anne@ecole.be", "password": "faux"})
    assert response.status_code == 401
    response = client.post("/api/auth/login", json={"email": "inconnu@ecole.be", "password": "secret123"})
    assert response.status_code == 401


def test_email_duplique_409(sqlite_app):
    client, _ = sqlite_app
    register(client, "Anne", "Professeur")
    response = client.post("/api/auth/register", json={
        "first_name": "Anne", "last_name": "Bis", "email": "anne@ecole.be",
        "password": "secret123", "role": "Etudiant",
    })
    assert response.status_code == 409


def test_amorcage_du_premier_coordinateur(sqlite_app):
    client, _ = sqlite_app
    register(client, "Marc", "Coordinateur")
    response = client.post("/api/auth/register", json={
        "first_name": "Paul", "last_name": "Test", "email": "paul@ecole.be",
        "password": "secret123", "role": "Coordinateur",
    })
    assert response.status_code == 403


# ============================================================
# Classes, tâches et soumissions
# ============================================================

def test_parcours_classe_tache_soumission(sqlite_app):
    client, TestingSession = sqlite_app
    teacher_a, _ = register(client, "Anne", "Professeur")
    teacher_b, _ = register(client, "Bruno", "Professeur")
    student, student_id = register(client, "Lina", "Etudiant")
    outsider, _ = register(client, "Tom", "Etudiant")

    school_class = create_class(client, teacher_a)
    class_id = school_class["id"]
    assert len(school_class["code"]) == 6

    # Inscription par code, insensible à la casse ; une seule inscription possible
    response = client.post("/api/classes/join", json={"code": school_class["code"].lower()}, headers=student)
    assert response.status_code == 200
    response = client.post("/api/classes/join", json={"code": school_class["code"]}, headers=student)
    assert response.status_code == 409
    response = client.post("/api/classes/join", json={"code": "ZZZZZZ"}, headers=outsider)
    assert response.status_code == 404

    students = client.get(f"/api/classes/{class_id}/students", headers=teacher_a).json()
    assert [s["id"] for s in students] == [student_id]
    my_classes = client.get("/api/classes/me", headers=student).json()
    assert my_classes[0]["id"] == class_id

    task_id = create_task(client, teacher_a, class_id)

    # Un autre professeur ne peut pas assigner de tâche dans la classe
    response = client.post("/api/tasks", json={
        "class_id": class_id, "title": "Intrus", "deadline": "2030-06-01T12:00:00",
    }, headers=teacher_b)
    assert response.status_code == 403

    # Soumission puis resoumission : même ligne
    first = client.post(f"/api/tasks/{task_id}/submit", json={"file_path": "v1.pdf"}, headers=student)
    assert first.status_code == 201
    second = client.post(f"/api/tasks/{task_id}/submit", json={"file_path": "v2.pdf"}, headers=student)
    assert second.status_code == 200
    submission_id = first.json()["submission_id"]
    assert second.json()["submission_id"] == submission_id

    submissions = client.get(f"/api/tasks/{task_id}/submissions", headers=teacher_a).json()
    assert len(submissions) == 1
    assert submissions[0]["file_path"] == "v2.pdf"

    # Notation : seul le professeur de la tâche
    response = client.put(f"/api/submissions/{submission_id}/grade",
                          json={"grade": 15, "feedback": "Bien"}, headers=teacher_b)
    assert response.status_code == 403
    response = client.put(f"/api/submissions/{submission_id}/grade",
                          json={"grade": 15, "feedback": "Bien"}, headers=teacher_a)
    assert response.status_code == 200

    detail = client.get(f"/api/submissions/{submission_id}", headers=student).json()
    assert detail["grade"] == 15
    assert detail["task_title"] == "Devoir 1"
    assert client.get(f"/api/submissions/{submission_id}", headers=outsider).status_code == 403
    assert client.get("/api/submissions/9999", headers=student).status_code == 404

    mine = client.get("/api/users/me/submissions", headers=student).json()
    assert [s["id"] for s in mine] == [submission_id]

    # Un étudiant non inscrit : 403 sur la classe, 404 sur une tâche inexistante
    assert client.get(f"/api/tasks/class/{class_id}", headers=outsider).status_code == 403
    assert client.post(f"/api/tasks/{task_id}/submit", json={"content": "x"}, headers=outsider).status_code == 403
    assert client.post("/api/tasks/9999/submit", json={"content": "x"}, headers=outsider).status_code == 404


def test_desinscription_retire_l_acces_immediatement(sqlite_app):
    client, TestingSession = sqlite_app
    teacher, _ = register(client, "Anne", "Professeur")
    student, student_id = register(client, "Lina", "Etudiant")
    school_class = create_class(client, teacher)
    client.post("/api/classes/join", json={"code": school_class["code"]}, headers=student)
    task_id = create_task(client, teacher, school_class["id"])

    assert client.get(f"/api/tasks/class/{school_class['id']}", headers=student).status_code == 200

    with TestingSession() as db:
        db.execute(delete(ClassMember).where(ClassMember.user_id == student_id))
        db.commit()

    # Même token, inscription supprimée : refus sans réémission du token
    assert client.get(f"/api/tasks/class/{school_class['id']}", headers=student).status_code == 403
    response = client.post(f"/api/tasks/{task_id}/submit", json={"content": "x"}, headers=student)
    assert response.status_code == 403


def test_annonces_et_documentations(sqlite_app):
    client, _ = sqlite_app
    teacher, _ = register(client, "Anne", "Professeur")
    other, _ = register(client, "Bruno", "Professeur")
    student, _ = register(client, "Lina", "Etudiant")
    school_class = create_class(client, teacher)
    class_id = school_class["id"]
    client.post("/api/classes/join", json={"code": school_class["code"]}, headers=student)

    response = client.post("/api/announcements", json={
        "class_id": class_id, "title": "Rentrée", "content": "Bienvenue",
    }, headers=teacher)
    assert response.status_code == 201
    response = client.post("/api/announcements", json={
        "class_id": class_id, "title": "Intrus", "content": "x",
    }, headers=other)
    assert response.status_code == 403

    response = client.post("/api/documentations", json={
        "class_id": class_id, "title": "Syllabus", "file_path": "syllabus.pdf",
    }, headers=teacher)
    assert response.status_code == 201

    announcements = client.get(f"/api/announcements/{class_id}", headers=student).json()
    assert announcements[0]["title"] == "Rentrée"
    documentations = client.get(f"/api/documentations/{class_id}", headers=student).json()
    assert documentations[0]["title"] == "Syllabus"
    assert client.get(f"/api/announcements/{class_id}", headers=other).status_code == 403
    assert client.get("/api/announcements/9999", headers=teacher).status_code == 404


# ============================================================
# Administration des utilisateurs
# ============================================================

def test_administration_par_le_coordinateur(sqlite_app):
    client, _ = sqlite_app
    coordinator, coordinator_id = register(client, "Marc", "Coordinateur")
    teacher, teacher_id = register(client, "Anne", "Professeur")
    _, student_id = register(client, "Lina", "Etudiant")

    users = client.get("/api/users/all", headers=coordinator)
    assert users.status_code == 200
    assert len(users.json()) == 3
    assert client.get("/api/users/all", headers=teacher).status_code == 403

    assert client.delete(f"/api/users/{coordinator_id}", headers=coordinator).status_code == 403
    response = client.put(f"/api/users/{coordinator_id}/role", json={"role": "Professeur"}, headers=coordinator)
    assert response.status_code == 403
    assert client.delete("/api/users/9999", headers=coordinator).status_code == 404

    assert client.delete(f"/api/users/{student_id}", headers=coordinator).status_code == 200
    assert len(client.get("/api/users/all", headers=coordinator).json()) == 2


def test_changement_de_role_effectif_au_token_suivant(sqlite_app):
    client, _ = sqlite_app
    coordinator, _ = register(client, "Marc", "Coordinateur")
    teacher, teacher_id = register(client, "Anne", "Professeur")

    response = client.put(f"/api/users/{teacher_id}/role", json={"role": "Coordinateur"}, headers=coordinator)
    assert response.status_code == 200

    # L'ancien token porte toujours le rôle Professeur
    assert client.get("/api/users/all", headers=teacher).status_code == 403
    fresh = login(client, "anne@ecole.be")
    assert client.get("/api/users/all", headers=fresh).status_code == 200


# ============================================================
# Projets et groupes
# ============================================================

def test_projets_groupes_et_coordinateur_inscrit(sqlite_app):
    client, _ = sqlite_app
    coordinator, _ = register(client, "Marc", "Coordinateur")
    teacher, teacher_id = register(client, "Anne", "Professeur")
    student, student_id = register(client, "Lina", "Etudiant")
    classmate, classmate_id = register(client, "Tom", "Etudiant")
    school_class = create_class(client, teacher)
    class_id = school_class["id"]
    for token in (student, classmate):
        client.post("/api/classes/join", json={"code": school_class["code"]}, headers=token)

    # Coordinateur non inscrit : refusé ; inscrit par code : autorisé
    project = {"class_id": class_id, "title": "Robotique", "start_date": "2030-01-10", "end_date": "2030-03-01"}
    assert client.post("/api/projects", json=project, headers=coordinator).status_code == 403
    assert client.post("/api/classes/join", json={"code": school_class["code"]}, headers=coordinator).status_code == 200
    response = client.post("/api/projects", json=project, headers=coordinator)
    assert response.status_code == 201
    project_id = response.json()["project_id"]

    projects = client.get(f"/api/projects/class/{class_id}", headers=student).json()
    assert projects[0]["title"] == "Robotique"

    response = client.post("/api/groups", json={"project_id": project_id, "name": "Alpha"}, headers=teacher)
    assert response.status_code == 201
    group_id = response.json()["group_id"]

    # Seuls des étudiants de la classe peuvent rejoindre un groupe
    assert client.post(f"/api/groups/{group_id}/members", json={"user_id": teacher_id}, headers=teacher).status_code == 400
    for user_id in (student_id, classmate_id):
        response = client.post(f"/api/groups/{group_id}/members", json={"user_id": user_id}, headers=coordinator)
        assert response.status_code == 200
    assert client.post(f"/api/groups/{group_id}/members", json={"user_id": student_id}, headers=teacher).status_code == 409

    # Responsable de groupe
    assert client.put(f"/api/groups/{group_id}", json={"name": "Beta"}, headers=student).status_code == 403
    assert client.put(f"/api/groups/{group_id}/leader", json={"user_id": student_id}, headers=teacher).status_code == 200
    response = client.put(f"/api/groups/{group_id}", json={"name": None}, headers=student)
    assert response.status_code == 400
    response = client.put(f"/api/groups/{group_id}", json={"name": "Beta"}, headers=student)
    assert response.status_code == 200
    assert response.json()["name"] == "Beta"
    assert client.put(f"/api/groups/{group_id}", json={"name": "Gamma"}, headers=classmate).status_code == 403
    assert client.put(f"/api/groups/{group_id}", json={"name": "Gamma"}, headers=coordinator).status_code == 403

    # Le leadership passe à un autre membre
    assert client.put(f"/api/groups/{group_id}/leader", json={"user_id": classmate_id}, headers=teacher).status_code == 200
    assert client.put(f"/api/groups/{group_id}", json={"name": "Gamma"}, headers=student).status_code == 403

    groups = client.get(f"/api/groups/project/{project_id}", headers=student).json()
    leaders = [m["id"] for m in groups[0]["members"] if m["is_group_coordinator"]]
    assert leaders == [classmate_id]

    mine = client.get("/api/groups/me", headers=student).json()
    assert mine[0]["project_title"] == "Robotique"

    response = client.delete(f"/api/groups/{group_id}/members/{student_id}", headers=teacher)
    assert response.status_code == 200
    assert client.get("/api/groups/me", headers=student).json() == []
    assert client.delete(f"/api/groups/{group_id}/members/{student_id}", headers=teacher).status_code == 404


# ============================================================
# Messagerie
# ============================================================

def test_messagerie_publique_et_privee(sqlite_app):
    client, _ = sqlite_app
    teacher, teacher_id = register(client, "Anne", "Professeur")
    student, student_id = register(client, "Lina", "Etudiant")
    outsider, _ = register(client, "Tom", "Etudiant")
    school_class = create_class(client, teacher)
    class_id = school_class["id"]
    client.post("/api/classes/join", json={"code": school_class["code"]}, headers=student)

    response = client.post("/api/messages", json={
        "message_type": "public", "class_id": class_id, "content": "Bonjour à tous",
    }, headers=teacher)
    assert response.status_code == 201
    response = client.post("/api/messages", json={
        "message_type": "public", "class_id": class_id, "content": "Salut",
    }, headers=student)
    assert response.status_code == 403

    public = client.get(f"/api/messages/public/class/{class_id}", headers=student).json()
    assert [m["content"] for m in public] == ["Bonjour à tous"]
    assert client.get(f"/api/messages/public/class/{class_id}", headers=outsider).status_code == 403

    response = client.post("/api/messages", json={
        "message_type": "private", "receiver_id": teacher_id, "content": "Question",
    }, headers=student)
    assert response.status_code == 201
    response = client.post("/api/messages", json={
        "message_type": "private", "receiver_id": 9999, "content": "Perdu",
    }, headers=student)
    assert response.status_code == 404

    inbox = client.get("/api/messages/private/me", headers=teacher).json()
    assert inbox[0]["sender_id"] == student_id
    assert inbox[0]["receiver_id"] == teacher_id
    assert client.get("/api/messages/private/me", headers=outsider).json() == []

"""Bundled scene table, used when the CSV cannot be loaded.

Each scene of Frankenstein (2025) sits on one of the 33 vertebrae. Intensity
here is already on the 0-1 scale. The table has no quotes, so the scene title
stands in for the quote and every scene is attributed to the narrator.
"""

from dataclasses import dataclass

from emospine.models import Record

FALLBACK_SPEAKER = "Narrator"
MAX_SECONDARY = 3


@dataclass(frozen=True)
class Section:
    """A narrative act mapped onto a region of the spine."""
    key: str
    label: str
    start: int
    end: int

    def contains(self, ordinal: int) -> bool:
        return self.start <= ordinal <= self.end


SECTIONS: tuple[Section, ...] = (
    Section("A", "Exposition / Cervical", 1, 7),
    Section("B", "Rising Action / Thoracic", 8, 14),
    Section("C", "Climax / Lumbar", 15, 21),
    Section("D", "Falling Action / Sacral", 22, 28),
    Section("E", "Resolution / Coccygeal", 29, 33),
)


def section_for(ordinal: int) -> Section | None:
    for section in SECTIONS:
        if section.contains(ordinal):
            return section
    return None


# (id, title, main emotion, intensity, emotions, notes)
SCENES: tuple[tuple[int, str, str, float, tuple[str, ...], str], ...] = (
    (1, "Arctic prologue, the ice-trapped ship", "dread", 0.90,
     ("confusion", "tension", "danger", "suspense", "dread"),
     "Ship stuck in ice, Victor half-frozen, shadowy creature attacking from the blizzard."),
    (2, "Victor on the brink, agreeing to tell his story", "foreboding", 0.70,
     ("curiosity", "doom"),
     "Victor, mangled and hollow-eyed, admits he created the Creature and begins his confession."),
    (3, "Mother's death caused by William's birth", "grief", 1.00,
     ("sadness", "unfairness", "sympathy", "grief"),
     "Victor's mother dies in childbirth; father's affection shifts to William and Victor is pushed aside."),
    (4, "Young Victor at medical school", "unease", 0.75,
     ("unease", "fascination", "discomfort"),
     "Victor excels at anatomy, lingers too long over cadavers with an obsessive, bright-eyed focus."),
    (5, "The reanimation tribunal in Edinburgh", "shock", 0.85,
     ("shock", "embarrassment"),
     "Victor's reanimation demo horrifies the board; he is expelled as a blasphemer in front of everyone."),
    (6, "Father's rejection", "humiliation", 0.85,
     ("anger", "empathy", "humiliation"),
     "At home, his father denounces him as a failure and moral disgrace while William remains the golden child."),
    (7, "Dinner with Harlander, first intro of Elizabeth", "anticipation", 0.60,
     ("intrigue", "romantic tension", "unease", "anticipation"),
     "Harlander offers Victor an isolated tower lab; Victor meets Elizabeth, William's fiancée, "
     "and the triangle is seeded."),
    (8, "Constructing the tower lab", "awe", 0.80,
     ("awe", "loss of control"),
     "Montage of brothers building the lab, lightning rods, anatomical sketches, spine diagrams "
     "that echo the project."),
    (9, "Victor's awkward advance toward Elizabeth", "tension", 0.75,
     ("discomfort", "embarrassment", "tension"),
     "Victor's feelings slip in the lab; Elizabeth senses it, and the air becomes thick with "
     "secondhand embarrassment."),
    (10, "Harvesting body parts", "revulsion", 0.90,
     ("revulsion", "moral unease", "pity", "disgust"),
     "Rain, mud, gallows, battlefields; Victor collects limbs and organs while trying to stay emotionally numb."),
    (11, "Harlander's demand and death", "horror", 0.85,
     ("horror", "panic", "relief", "moral confusion"),
     "Harlander demands his brain be used; he and Victor struggle and Harlander falls to his death "
     "from a high ledge."),
    (12, "The storm and apparent failure", "despair", 0.85,
     ("dread", "despair", "anticlimax", "pity"),
     "On the stormy night, lightning surges through the stitched body, but it appears lifeless; "
     "Victor collapses in despair."),
    (13, "First awakening at dawn", "awe", 0.80,
     ("surprise", "fear", "awe"),
     "In quiet morning light, a hand twitches and an eye opens; the Creature is alive and unnervingly present."),
    (14, "Training the Creature", "anxiety", 0.80,
     ("anxiety", "sympathy", "disgust with Victor"),
     "Victor keeps the Creature chained, forcing speech drills and lashing out when he fails; "
     "the Creature is confused and sad."),
    (15, "Elizabeth's kindness", "hope", 0.80,
     ("hope", "warmth", "fear"),
     "Elizabeth approaches gently, introduces herself, and gets the Creature to repeat her name; "
     "a fragile bond forms under Victor's shadow."),
    (16, "Victor's lie", "betrayal", 0.95,
     ("betrayal", "anger", "impending doom", "outrage"),
     "Victor lies that the Creature killed Harlander, sends William and Elizabeth away, and secretly "
     "plans to destroy the lab with the Creature inside."),
    (17, "Tower fire and explosion", "horror", 0.95,
     ("horror", "regret", "shock"),
     "The lab burns as the Creature cries \"Victor\"; Victor hesitates before the tower explodes, "
     "mangling his leg and scattering his experiment."),
    (18, "Creature boards the ship", "curiosity", 0.70,
     ("surprise", "curiosity", "intrigue"),
     "The narrative catches up; the Creature climbs aboard and asserts his right to tell his side "
     "in front of the crew."),
    (19, "The escape", "anxiety", 0.80,
     ("empathy", "anxiety", "survival instinct"),
     "He escapes the ruins through smoke and ash into a dark forest, wounded but alive and driven by survival."),
    (20, "First contact with the hunter's family (unseen)", "loneliness", 0.85,
     ("melancholy", "yearning", "curiosity", "loneliness"),
     "Hiding in the mill's gears, he watches the family argue, eat, and laugh, feeling what he lacks "
     "through cracks in the wall."),
    (21, "Spirit of the forest", "bittersweet", 0.80,
     ("bittersweet warmth", "pride", "fear"),
     "He chops wood and repairs things at night; the family thanks their unseen guardian, unaware "
     "their 'spirit' is the Creature."),
    (22, "Learning language through the wall", "wonder", 0.80,
     ("wonder", "tenderness", "admiration", "hope"),
     "He mimics the blind grandfather's reading lessons with the granddaughter, slowly sounding out "
     "words in the dark."),
    (23, "First direct meeting with the grandpa", "anxiety", 0.75,
     ("anxiety", "relief", "nervousness", "joy"),
     "After the family leaves for winter, the Creature steps out; the blind man accepts him by the "
     "fire, and tension melts into cautious joy."),
    (24, "The blind man's touch", "relief", 0.90,
     ("emotional release", "empathy", "warmth", "hope"),
     "The blind man touches his face, speaks to him as a person, and gives him language to name his pain."),
    (25, "Discovering the ruins of the lab and Victor's notes", "dread", 0.90,
     ("dread", "empathy", "anxiety", "shock"),
     "He finds the destroyed tower and Victor's journals, realizing he was assembled, labeled, and "
     "abandoned like a project."),
    (26, "Wolves and the blind man's death", "devastation", 1.00,
     ("heartbreak", "rage", "grief", "devastation"),
     "He fights wolves to protect the blind man, holds him as he dies, and is then driven away in "
     "terror by the returning family."),
    (27, "Failed attempts to die", "despair", 1.00,
     ("existential horror", "claustrophobia", "deep sorrow", "despair"),
     "He tries to freeze, drown, fall, yet his body refuses to die; immortality becomes a prison "
     "without companionship."),
    (28, "Night of the wedding", "desperation", 0.90,
     ("conflict", "tension", "desperation"),
     "At William and Elizabeth's wedding, the Creature confronts Victor, begging for a companion "
     "amid the decadence."),
    (29, "Elizabeth's death", "grief", 1.00,
     ("shock", "grief", "anger", "pity", "sadness", "lost hope"),
     "Victor calls the Creature an abomination and fires; Elizabeth steps between them and is shot."),
    (30, "Wedding chaos", "guilt", 0.85,
     ("moral clarity", "sorrow", "guilt"),
     "Violence erupts at the celebration; in his last moments, William calls Victor the real monster."),
    (31, "Cave of mourning with Elizabeth", "grief", 1.00,
     ("unbearable sadness", "sympathy", "grief", "sorrow"),
     "The Creature carries Elizabeth into a cave, trying to comfort her as she dies, cradling her "
     "body in the cold."),
    (32, "Long pursuit across the Arctic", "revenge", 0.80,
     ("fatigue", "revenge", "emptiness"),
     "Victor hunts the Creature across the Arctic with dynamite; both are exhausted shadows driven "
     "only by obsession."),
    (33, "Final reconciliation", "bittersweet", 0.80,
     ("bittersweet", "lingering sadness", "melancholy", "closure"),
     "Back on the ship, Victor apologizes and dies; the Creature forgives him and frees the ship "
     "from the ice, ending the cycle of revenge."),
)


def fallback_records() -> list[Record]:
    """The bundled scenes as Records, sorted by ordinal."""
    return [
        Record(
            ordinal=scene_id,
            category=emotion,
            intensity=intensity,
            secondary=emotions[:MAX_SECONDARY],
            context=notes,
            quote=title,
            speaker=FALLBACK_SPEAKER,
        )
        for scene_id, title, emotion, intensity, emotions, notes in SCENES
    ]
